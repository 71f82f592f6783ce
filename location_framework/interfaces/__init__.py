"""
Abstract interfaces for the location framework collaborators.
"""

from .geocoding import GeocodingInterface
from .location_store import LocationStoreInterface
from .device_location import DeviceLocationInterface
from .session import SessionInterface
from .presentation import NotifierInterface, ConfirmationInterface, NavigatorInterface

__all__ = [
    'GeocodingInterface',
    'LocationStoreInterface',
    'DeviceLocationInterface',
    'SessionInterface',
    'NotifierInterface',
    'ConfirmationInterface',
    'NavigatorInterface',
]
