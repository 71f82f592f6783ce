"""
Factory for creating provider instances based on configuration.
"""

from typing import Dict, Any, Optional

try:
    # Try relative imports first (when used as package)
    from .interfaces import (
        GeocodingInterface,
        LocationStoreInterface,
        DeviceLocationInterface,
        SessionInterface,
        ConfirmationInterface,
    )
    from .providers.geocoding import OpenMeteoGeocodingProvider
    from .providers.location_store import SupabaseLocationStore, InMemoryLocationStore
    from .providers.device_location import IPGeolocationProvider
    from .providers.session import SupabaseAuthSession, LocalSession
except ImportError:
    # Fall back to absolute imports (when run as module)
    from location_framework.interfaces import (
        GeocodingInterface,
        LocationStoreInterface,
        DeviceLocationInterface,
        SessionInterface,
        ConfirmationInterface,
    )
    from location_framework.providers.geocoding import OpenMeteoGeocodingProvider
    from location_framework.providers.location_store import SupabaseLocationStore, InMemoryLocationStore
    from location_framework.providers.device_location import IPGeolocationProvider
    from location_framework.providers.session import SupabaseAuthSession, LocalSession


class ProviderFactory:
    """Factory for creating provider instances."""

    GEOCODING_PROVIDERS = {
        'open_meteo': OpenMeteoGeocodingProvider,
    }

    STORE_PROVIDERS = {
        'supabase': SupabaseLocationStore,
        'memory': InMemoryLocationStore,
    }

    DEVICE_LOCATION_PROVIDERS = {
        'ip_geolocation': IPGeolocationProvider,
    }

    SESSION_PROVIDERS = {
        'supabase': SupabaseAuthSession,
        'local': LocalSession,
    }

    @staticmethod
    def _lookup(registry: Dict[str, type], kind: str, provider_name: str) -> type:
        if provider_name not in registry:
            available = ', '.join(registry.keys())
            raise ValueError(f"Unsupported {kind} provider: {provider_name}. Available: {available}")
        return registry[provider_name]

    @classmethod
    def create_geocoding_provider(cls,
                                  provider_name: str,
                                  config: Dict[str, Any]) -> GeocodingInterface:
        """
        Create a geocoding provider instance.

        Raises:
            ValueError: If provider name is not supported
        """
        provider_class = cls._lookup(cls.GEOCODING_PROVIDERS, "geocoding", provider_name)
        return provider_class(config)

    @classmethod
    def create_store_provider(cls,
                              provider_name: str,
                              config: Dict[str, Any],
                              session: Optional[SessionInterface] = None) -> LocationStoreInterface:
        """
        Create a location store instance.

        A Supabase store reuses the Supabase session's client so its queries run
        under the signed-in user's token.
        """
        provider_class = cls._lookup(cls.STORE_PROVIDERS, "store", provider_name)
        if provider_class is SupabaseLocationStore and isinstance(session, SupabaseAuthSession):
            config = dict(config)
            config.setdefault("client", session.client)
        return provider_class(config)

    @classmethod
    def create_device_location_provider(cls,
                                        provider_name: str,
                                        config: Dict[str, Any],
                                        consent_prompt: Optional[ConfirmationInterface] = None
                                        ) -> DeviceLocationInterface:
        """Create a device location provider instance."""
        provider_class = cls._lookup(cls.DEVICE_LOCATION_PROVIDERS, "device location", provider_name)
        return provider_class(config, consent_prompt=consent_prompt)

    @classmethod
    def create_session_provider(cls,
                                provider_name: str,
                                config: Dict[str, Any]) -> SessionInterface:
        """Create a session provider instance."""
        provider_class = cls._lookup(cls.SESSION_PROVIDERS, "session", provider_name)
        return provider_class(config)

    @classmethod
    def list_providers(cls) -> Dict[str, list]:
        return {
            'geocoding': list(cls.GEOCODING_PROVIDERS.keys()),
            'store': list(cls.STORE_PROVIDERS.keys()),
            'device_location': list(cls.DEVICE_LOCATION_PROVIDERS.keys()),
            'session': list(cls.SESSION_PROVIDERS.keys()),
        }
