"""
Pydantic configuration models with validation.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Dict, Any


class ProviderSelection(BaseModel):
    """A provider name plus its raw config dict."""
    provider: str = Field(..., min_length=1, description="Provider name")
    config: Dict[str, Any] = Field(default_factory=dict, description="Provider configuration")


class GeocodingConfig(BaseModel):
    """Open-Meteo geocoding configuration."""
    base_url: str = Field("https://geocoding-api.open-meteo.com/v1/search", description="Search endpoint")
    request_timeout: Optional[float] = Field(10.0, gt=0, description="Request timeout in seconds")

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        if not v.startswith(("http://", "https://")):
            raise ValueError('Geocoding base_url must be an http(s) URL')
        return v


class SearchConfig(BaseModel):
    """Search controller configuration."""
    min_query_length: int = Field(2, ge=1, le=10, description="Minimum query length before searching")
    result_limit: int = Field(5, ge=1, le=100, description="Results requested per search")
    language: str = Field("en", min_length=2, max_length=5, description="Response language code")
    debounce_seconds: float = Field(0.0, ge=0.0, le=5.0, description="Debounce delay")


class SupabaseConfig(BaseModel):
    """Supabase store/session configuration."""
    url: str = Field(..., description="Supabase project URL")
    key: str = Field(..., description="Supabase anon key")
    table_name: str = Field("saved_locations", description="Saved locations table")
    profile_table: str = Field("user_details", description="Profile table")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if not v or not v.startswith("https://"):
            raise ValueError('Invalid Supabase URL (expected https://...)')
        return v

    @field_validator('key')
    @classmethod
    def validate_key(cls, v):
        if not v or len(v) < 20:
            raise ValueError('Invalid Supabase key (too short)')
        return v


class DeviceLocationConfig(BaseModel):
    """IP geolocation configuration."""
    permission: str = Field("prompt", description="granted, denied or prompt")
    request_timeout: float = Field(5.0, gt=0, description="Request timeout in seconds")
    user_agent: str = Field("location-framework/1.0", min_length=1, description="User agent for Nominatim")

    @field_validator('permission')
    @classmethod
    def validate_permission(cls, v):
        v = (v or "").lower()
        valid = ['granted', 'denied', 'prompt']
        if v not in valid:
            raise ValueError(f'Invalid permission mode. Must be one of: {valid}')
        return v


class PanelConfig(BaseModel):
    """Panel animation configuration."""
    animation_duration: float = Field(0.3, ge=0.0, le=5.0, description="Transition duration in seconds")
    history_size: int = Field(50, ge=1, le=1000, description="Transitions kept in history")


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field("INFO", description="Log level")
    log_file: Optional[str] = Field(None, description="Optional log file path")
    use_colors: bool = True
    use_emojis: bool = True

    @field_validator('level')
    @classmethod
    def validate_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Invalid log level. Must be one of: {valid_levels}')
        return v.upper()


class FrameworkConfig(BaseModel):
    """Complete framework configuration."""
    geocoding: ProviderSelection
    store: ProviderSelection
    device_location: ProviderSelection
    session: ProviderSelection
    search: SearchConfig = Field(default_factory=SearchConfig)
    panels: PanelConfig = Field(default_factory=PanelConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode='after')
    def validate_providers(self):
        """Validate the provider-specific sections that have a model."""
        errors = []

        if self.geocoding.provider == "open_meteo":
            GeocodingConfig(**_known(self.geocoding.config, GeocodingConfig))

        if self.device_location.provider == "ip_geolocation":
            DeviceLocationConfig(**_known(self.device_location.config, DeviceLocationConfig))

        for name, section in (("store", self.store), ("session", self.session)):
            if section.provider != "supabase":
                continue
            if section.config.get("client") is not None:
                continue
            if not section.config.get("url") or not section.config.get("key"):
                errors.append(f"Supabase URL and key required for {name}")
            else:
                SupabaseConfig(**_known(section.config, SupabaseConfig))

        if errors:
            raise ValueError('; '.join(errors))

        return self

    @classmethod
    def from_framework_dict(cls, config: Dict[str, Any]) -> 'FrameworkConfig':
        """Validate a dict produced by config.get_framework_config()."""
        return cls(**config)


def _known(values: Dict[str, Any], model: type) -> Dict[str, Any]:
    """Keep only the keys a model declares."""
    return {k: v for k, v in values.items() if k in model.model_fields}
