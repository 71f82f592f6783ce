"""
Abstract interface for device position, permission and reverse geocoding.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.data_models import Address, Coordinates, PermissionStatus


class DeviceLocationInterface(ABC):
    """Abstract base class for device location providers."""

    @abstractmethod
    async def initialize(self) -> bool:
        pass

    @abstractmethod
    async def request_permission(self) -> PermissionStatus:
        """
        Request foreground location permission.

        Returns:
            PermissionStatus.GRANTED or PermissionStatus.DENIED
        """
        pass

    @abstractmethod
    async def get_current_position(self) -> Coordinates:
        """
        Obtain a position fix.

        Raises:
            DeviceLocationError: If no fix could be obtained
        """
        pass

    @abstractmethod
    async def reverse_geocode(self, coordinates: Coordinates) -> List[Address]:
        """
        Turn coordinates into address candidates (possibly none).

        Raises:
            ReverseGeocodingError: If the lookup itself failed
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        pass
