"""
Provider implementations for the location framework.
"""

from .geocoding import OpenMeteoGeocodingProvider
from .location_store import SupabaseLocationStore, InMemoryLocationStore
from .device_location import IPGeolocationProvider
from .session import SupabaseAuthSession, LocalSession
from .presentation import ConsoleNotifier, ConsoleConfirmation, ConsoleNavigator

__all__ = [
    'OpenMeteoGeocodingProvider',
    'SupabaseLocationStore',
    'InMemoryLocationStore',
    'IPGeolocationProvider',
    'SupabaseAuthSession',
    'LocalSession',
    'ConsoleNotifier',
    'ConsoleConfirmation',
    'ConsoleNavigator',
]
