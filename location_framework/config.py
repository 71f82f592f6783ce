"""
Configuration for the location framework.
Organized into discrete feature sections for clarity.
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional
from dotenv import load_dotenv


# =============================================================================
# SECTION 1: ENVIRONMENT & CREDENTIALS
# =============================================================================

# Load environment variables from the project root
parent_dir = Path(__file__).parent.parent
env_path = parent_dir / ".env"
if env_path.exists():
    load_dotenv(env_path)


# =============================================================================
# SECTION 2: PROVIDER SELECTION
# =============================================================================
# Choose which provider implementation to use for each collaborator.

GEOCODING_PROVIDER = "open_meteo"
LOCATION_STORE_PROVIDER = "supabase"      # Options: "supabase", "memory"
DEVICE_LOCATION_PROVIDER = "ip_geolocation"
SESSION_PROVIDER = "supabase"             # Options: "supabase", "local"


# =============================================================================
# SECTION 3: GEOCODING & SEARCH
# =============================================================================

OPEN_METEO_GEOCODING_CONFIG = {
    "base_url": "https://geocoding-api.open-meteo.com/v1/search",
    "request_timeout": 10.0,    # Seconds; None leaves it to the transport
}

SEARCH_CONFIG = {
    "min_query_length": 2,      # Shorter queries clear results without a call
    "result_limit": 5,
    "language": "en",
    "debounce_seconds": 0.0,    # 0 = search on every keystroke
}


# =============================================================================
# SECTION 4: PERSISTENT STORE (Supabase)
# =============================================================================

SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL"),
    "key": os.getenv("SUPABASE_KEY"),   # anon key; rows are scoped by the user's JWT
    "table_name": "saved_locations",
    "profile_table": "user_details",
}

MEMORY_STORE_CONFIG = {
    "profiles": {},
    "locations": [],
}


# =============================================================================
# SECTION 5: SESSION
# =============================================================================

SUPABASE_AUTH_CONFIG = {
    "url": os.getenv("SUPABASE_URL"),
    "key": os.getenv("SUPABASE_KEY"),
    "email": os.getenv("SUPABASE_EMAIL"),
    "password": os.getenv("SUPABASE_PASSWORD"),
}

LOCAL_SESSION_CONFIG = {
    "user_id": os.getenv("LOCAL_USER_ID", "local-user"),
    "email": os.getenv("LOCAL_USER_EMAIL"),
}


# =============================================================================
# SECTION 6: DEVICE LOCATION
# =============================================================================

IP_GEOLOCATION_CONFIG = {
    "permission": os.getenv("LOCATION_PERMISSION", "prompt"),   # granted | denied | prompt
    "request_timeout": 5.0,
    "user_agent": os.getenv("NOMINATIM_USER_AGENT", "location-framework/1.0"),
}


# =============================================================================
# SECTION 7: PANELS
# =============================================================================

PANEL_CONFIG = {
    "animation_duration": 0.3,  # Seconds for the 0→1 / 1→0 interpolation
    "history_size": 50,
}


# =============================================================================
# SECTION 8: LOGGING
# =============================================================================

LOGGING_CONFIG = {
    "level": os.getenv("LOG_LEVEL", "INFO"),
    "log_file": os.getenv("LOG_FILE"),
    "use_colors": True,
    "use_emojis": True,
}


# =============================================================================
# SECTION 9: FRAMEWORK ASSEMBLY
# =============================================================================

_STORE_CONFIGS = {
    "supabase": SUPABASE_CONFIG,
    "memory": MEMORY_STORE_CONFIG,
}

_SESSION_CONFIGS = {
    "supabase": SUPABASE_AUTH_CONFIG,
    "local": LOCAL_SESSION_CONFIG,
}


def get_framework_config() -> Dict[str, Any]:
    """
    Assemble the complete framework configuration.

    Returns:
        Dictionary containing all provider configurations
    """
    return {
        "geocoding": {
            "provider": GEOCODING_PROVIDER,
            "config": OPEN_METEO_GEOCODING_CONFIG.copy(),
        },
        "store": {
            "provider": LOCATION_STORE_PROVIDER,
            "config": dict(_STORE_CONFIGS.get(LOCATION_STORE_PROVIDER, {})),
        },
        "device_location": {
            "provider": DEVICE_LOCATION_PROVIDER,
            "config": IP_GEOLOCATION_CONFIG.copy(),
        },
        "session": {
            "provider": SESSION_PROVIDER,
            "config": dict(_SESSION_CONFIGS.get(SESSION_PROVIDER, {})),
        },
        "search": SEARCH_CONFIG.copy(),
        "panels": PANEL_CONFIG.copy(),
        "logging": LOGGING_CONFIG.copy(),
    }


# =============================================================================
# SECTION 10: ENVIRONMENT PRESETS
# =============================================================================

# Active preset: "default", "dev", "prod", "test"
CONFIG_PRESET: str = "default"


def set_active_preset(preset: str) -> None:
    """Set the active configuration preset."""
    global CONFIG_PRESET
    CONFIG_PRESET = preset


def get_active_preset() -> str:
    """Get the current active configuration preset."""
    return CONFIG_PRESET


def get_development_config() -> Dict[str, Any]:
    """Get configuration optimized for development."""
    config = get_framework_config()
    config["logging"]["level"] = "DEBUG"
    return config


def get_production_config() -> Dict[str, Any]:
    """Get configuration optimized for production."""
    config = get_framework_config()
    config["logging"]["level"] = "WARNING"
    config["logging"]["use_emojis"] = False
    return config


def get_testing_config() -> Dict[str, Any]:
    """Get configuration for testing: no network for store or session."""
    config = get_framework_config()
    config["store"] = {"provider": "memory", "config": MEMORY_STORE_CONFIG.copy()}
    config["session"] = {"provider": "local", "config": LOCAL_SESSION_CONFIG.copy()}
    config["device_location"]["config"]["permission"] = "granted"
    config["logging"]["level"] = "DEBUG"
    return config


def get_config_for_preset(preset: Optional[str] = None) -> Dict[str, Any]:
    """Return configuration based on preset name."""
    p = (preset or CONFIG_PRESET or "default").lower()
    if p in ("dev", "development"):
        return get_development_config()
    if p in ("prod", "production"):
        return get_production_config()
    if p in ("test", "testing"):
        return get_testing_config()
    return get_framework_config()


# =============================================================================
# SECTION 11: RUNTIME PROVIDER SWITCHING
# =============================================================================

def set_providers(
    geocoding: Optional[str] = None,
    store: Optional[str] = None,
    device_location: Optional[str] = None,
    session: Optional[str] = None
):
    """Override provider selection at runtime."""
    global GEOCODING_PROVIDER, LOCATION_STORE_PROVIDER, DEVICE_LOCATION_PROVIDER, SESSION_PROVIDER

    if geocoding:
        GEOCODING_PROVIDER = geocoding
    if store:
        LOCATION_STORE_PROVIDER = store
    if device_location:
        DEVICE_LOCATION_PROVIDER = device_location
    if session:
        SESSION_PROVIDER = session


# =============================================================================
# SECTION 12: VALIDATION & DIAGNOSTICS
# =============================================================================

def validate_environment() -> Dict[str, Any]:
    """Validate the environment and configuration."""
    results = {"valid": True, "errors": [], "warnings": [], "info": []}

    if LOCATION_STORE_PROVIDER == "supabase" or SESSION_PROVIDER == "supabase":
        if not SUPABASE_CONFIG["url"]:
            results["errors"].append("Missing required: SUPABASE_URL")
            results["valid"] = False
        if not SUPABASE_CONFIG["key"]:
            results["errors"].append("Missing required: SUPABASE_KEY")
            results["valid"] = False

    if SESSION_PROVIDER == "supabase":
        if not SUPABASE_AUTH_CONFIG["email"] or not SUPABASE_AUTH_CONFIG["password"]:
            results["warnings"].append(
                "SUPABASE_EMAIL/SUPABASE_PASSWORD not set (an existing session is required)"
            )
        else:
            results["info"].append(f"Supabase sign-in: {SUPABASE_AUTH_CONFIG['email']}")

    permission = (IP_GEOLOCATION_CONFIG.get("permission") or "").lower()
    if permission not in ("granted", "denied", "prompt"):
        results["errors"].append(f"Invalid LOCATION_PERMISSION: {permission}")
        results["valid"] = False
    elif permission == "denied":
        results["warnings"].append("Location permission denied (current location capture disabled)")

    if LOCATION_STORE_PROVIDER == "memory":
        results["warnings"].append("Using in-memory store (saved locations are not persisted)")

    return results


def print_config_summary():
    """Print a summary of the current configuration."""
    print("=" * 60)
    print("🔧 Location Framework Configuration")
    print("=" * 60)

    print(f"Preset: {get_active_preset()}")
    print(f"Geocoding: {GEOCODING_PROVIDER}")
    print(f"Store: {LOCATION_STORE_PROVIDER}")
    print(f"Device Location: {DEVICE_LOCATION_PROVIDER}")
    print(f"Session: {SESSION_PROVIDER}")
    print()

    validation = validate_environment()
    if validation["valid"]:
        print("✅ Configuration Valid")
    else:
        print("❌ Configuration Issues:")
        for error in validation["errors"]:
            print(f"  - {error}")

    if validation["warnings"]:
        print("\n⚠️  Warnings:")
        for warning in validation["warnings"]:
            print(f"  - {warning}")

    print("=" * 60)
