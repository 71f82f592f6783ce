"""
Open-Meteo geocoding provider.
Free place search, no API key required.
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

try:
    from ...interfaces.geocoding import GeocodingInterface
    from ...models.data_models import SearchResult
    from ...utils.error_handling import GeocodingError
    from ...utils.logging_config import get_logger
except ImportError:
    from location_framework.interfaces.geocoding import GeocodingInterface
    from location_framework.models.data_models import SearchResult
    from location_framework.utils.error_handling import GeocodingError
    from location_framework.utils.logging_config import get_logger


logger = get_logger("geocoding")

DEFAULT_BASE_URL = "https://geocoding-api.open-meteo.com/v1/search"


class OpenMeteoGeocodingProvider(GeocodingInterface):
    """
    Place search against the Open-Meteo geocoding API.

    Configuration:
        - base_url: Search endpoint (default: Open-Meteo v1 search)
        - request_timeout: Total seconds per request, None for transport default
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self.base_url = config.get("base_url", DEFAULT_BASE_URL)
        self.request_timeout = config.get("request_timeout", 10.0)
        self._in_flight = 0

    @property
    def in_flight(self) -> bool:
        return self._in_flight > 0

    async def initialize(self) -> bool:
        logger.info("Open-Meteo geocoding ready (%s)", self.base_url)
        return True

    async def search(self, query: str, count: int = 5, language: str = "en") -> List[SearchResult]:
        """Search places by name; candidates keep the service's order."""
        params = {
            "name": query,
            "count": str(count),
            "language": language,
            "format": "json",
        }
        session_kwargs = {}
        if self.request_timeout:
            session_kwargs["timeout"] = aiohttp.ClientTimeout(total=self.request_timeout)

        self._in_flight += 1
        try:
            async with aiohttp.ClientSession(**session_kwargs) as session:
                async with session.get(self.base_url, params=params) as response:
                    if response.status != 200:
                        raise GeocodingError(f"Search failed (HTTP {response.status})")
                    data = await response.json()
        except GeocodingError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise GeocodingError(f"Search request failed: {e}") from e
        finally:
            self._in_flight -= 1

        return self._parse_results(data)

    def _parse_results(self, data: Any) -> List[SearchResult]:
        if not isinstance(data, dict):
            raise GeocodingError("Unexpected search response shape")

        # No matches: the service omits "results" entirely
        rows = data.get("results") or []

        results = []
        for row in rows:
            try:
                results.append(SearchResult(
                    name=row["name"],
                    country=row.get("country"),
                    latitude=float(row["latitude"]),
                    longitude=float(row["longitude"]),
                ))
            except (KeyError, TypeError, ValueError):
                logger.debug("Skipping malformed search row: %r", row)
        return results

    async def cleanup(self) -> None:
        self._in_flight = 0
