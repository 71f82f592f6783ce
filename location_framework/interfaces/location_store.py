"""
Abstract interface for the remote saved-location store.
Every operation is scoped to the owning user's identifier.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.data_models import SavedLocation


class LocationStoreInterface(ABC):
    """Abstract base class for all location store providers."""

    @abstractmethod
    async def initialize(self) -> bool:
        """
        Initialize the store connection.

        Returns:
            bool: True if initialization successful
        """
        pass

    @abstractmethod
    async def list_locations(self, user_id: str) -> List[SavedLocation]:
        """
        Fetch every saved location owned by a user.

        Args:
            user_id: Owning user identifier

        Returns:
            Locations ordered by creation time, newest first

        Raises:
            LocationStoreError: If the fetch fails
        """
        pass

    @abstractmethod
    async def insert_location(
        self,
        user_id: str,
        name: str,
        latitude: float,
        longitude: float
    ) -> SavedLocation:
        """
        Insert one saved location.

        Returns:
            The stored row, with store-assigned id and creation timestamp

        Raises:
            LocationStoreError: If the insert fails
        """
        pass

    @abstractmethod
    async def delete_location(self, location_id: str, user_id: str) -> None:
        """
        Delete one saved location owned by a user.

        Raises:
            LocationNotFoundError: If no row matched
            LocationStoreError: If the delete fails
        """
        pass

    @abstractmethod
    async def fetch_profile_name(self, user_id: str) -> Optional[str]:
        """
        Read the user's display name from the profile table.

        Returns:
            "First Last", or None if there is no profile row

        Raises:
            LocationStoreError: If the lookup fails
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up resources and close connections."""
        pass
