"""
Abstract interface for place-search (geocoding) providers.
"""

from abc import ABC, abstractmethod
from typing import List

from ..models.data_models import SearchResult


class GeocodingInterface(ABC):
    """Abstract base class for all geocoding providers."""

    @abstractmethod
    async def initialize(self) -> bool:
        """
        Prepare the provider.

        Returns:
            bool: True if initialization successful
        """
        pass

    @abstractmethod
    async def search(self, query: str, count: int = 5, language: str = "en") -> List[SearchResult]:
        """
        Search places by free-text name.

        Args:
            query: Free-text place name
            count: Maximum number of candidates to return
            language: Response language code

        Returns:
            Candidates in service order (not re-sorted)

        Raises:
            GeocodingError: On transport failure or non-success response
        """
        pass

    @property
    @abstractmethod
    def in_flight(self) -> bool:
        """True while at least one request is outstanding."""
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Clean up resources."""
        pass
