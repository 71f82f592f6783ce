"""
Device location from IP geolocation.

Position comes from ipinfo.io with ip-api.com as fallback; reverse geocoding
uses the OpenStreetMap Nominatim reverse endpoint. Permission is a consent
setting: "granted", "denied", or "prompt" (ask once through a confirmation
collaborator and remember the answer for the session).
"""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp

try:
    from ...interfaces.device_location import DeviceLocationInterface
    from ...interfaces.presentation import ConfirmationInterface
    from ...models.data_models import Address, Coordinates, PermissionStatus
    from ...utils.error_handling import DeviceLocationError, ReverseGeocodingError
    from ...utils.logging_config import get_logger
except ImportError:
    from location_framework.interfaces.device_location import DeviceLocationInterface
    from location_framework.interfaces.presentation import ConfirmationInterface
    from location_framework.models.data_models import Address, Coordinates, PermissionStatus
    from location_framework.utils.error_handling import DeviceLocationError, ReverseGeocodingError
    from location_framework.utils.logging_config import get_logger


logger = get_logger("device")

IPINFO_URL = "https://ipinfo.io/json"
IP_API_URL = "http://ip-api.com/json/?fields=lat,lon,city,regionName,country,status"
NOMINATIM_REVERSE_URL = "https://nominatim.openstreetmap.org/reverse"


class IPGeolocationProvider(DeviceLocationInterface):
    """
    IP-based device location provider.

    Configuration:
        - permission: "granted", "denied" or "prompt" (default: "prompt")
        - request_timeout: Seconds per HTTP request (default: 5)
        - user_agent: Sent to Nominatim, which requires one
        - ipinfo_url / ip_api_url / reverse_url: Endpoint overrides
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        consent_prompt: Optional[ConfirmationInterface] = None
    ):
        config = config or {}
        self.permission_mode = (config.get("permission") or "prompt").lower()
        if self.permission_mode not in ("granted", "denied", "prompt"):
            raise ValueError(f"Unknown permission mode: {self.permission_mode}")

        self.request_timeout = config.get("request_timeout", 5.0)
        self.user_agent = config.get("user_agent", "location-framework/1.0")
        self.ipinfo_url = config.get("ipinfo_url", IPINFO_URL)
        self.ip_api_url = config.get("ip_api_url", IP_API_URL)
        self.reverse_url = config.get("reverse_url", NOMINATIM_REVERSE_URL)

        self._consent_prompt = consent_prompt
        self._consent: Optional[PermissionStatus] = None

    async def initialize(self) -> bool:
        logger.info("IP geolocation ready (permission: %s)", self.permission_mode)
        return True

    async def request_permission(self) -> PermissionStatus:
        if self.permission_mode == "granted":
            return PermissionStatus.GRANTED
        if self.permission_mode == "denied":
            return PermissionStatus.DENIED

        if self._consent is not None:
            return self._consent

        if self._consent_prompt is None:
            logger.warning("No consent prompt available, treating location permission as denied")
            return PermissionStatus.DENIED

        try:
            allowed = await self._consent_prompt.ask(
                "Location Permission",
                "Allow this app to use your approximate location?",
                confirm_label="Allow",
                cancel_label="Don't Allow",
            )
        except Exception as e:
            raise DeviceLocationError(f"Permission prompt failed: {e}") from e

        # Only a grant is remembered; a refusal is asked again next time
        if allowed:
            self._consent = PermissionStatus.GRANTED
            return PermissionStatus.GRANTED
        return PermissionStatus.DENIED

    async def _get_json(self, url: str, params: Optional[Dict[str, str]] = None) -> Optional[Any]:
        """GET a JSON document; None on non-200."""
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}
        async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
            async with session.get(url, params=params) as response:
                if response.status != 200:
                    logger.debug("GET %s returned HTTP %s", url, response.status)
                    return None
                return await response.json(content_type=None)

    async def get_current_position(self) -> Coordinates:
        # Primary: ipinfo.io
        try:
            data = await self._get_json(self.ipinfo_url)
            coordinates = self._parse_ipinfo(data)
            if coordinates:
                return coordinates
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug("ipinfo.io lookup failed: %s", e)

        # Fallback: ip-api.com
        try:
            data = await self._get_json(self.ip_api_url)
            coordinates = self._parse_ip_api(data)
            if coordinates:
                return coordinates
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.debug("ip-api.com lookup failed: %s", e)

        raise DeviceLocationError("Could not determine device position")

    @staticmethod
    def _parse_ipinfo(data: Any) -> Optional[Coordinates]:
        if not isinstance(data, dict):
            return None
        loc = data.get("loc", "")
        if not isinstance(loc, str) or "," not in loc:
            return None
        lat_str, lon_str = loc.split(",", 1)
        return Coordinates(float(lat_str), float(lon_str))

    @staticmethod
    def _parse_ip_api(data: Any) -> Optional[Coordinates]:
        if not isinstance(data, dict) or data.get("status") == "fail":
            return None
        lat, lon = data.get("lat"), data.get("lon")
        if not isinstance(lat, (int, float)) or not isinstance(lon, (int, float)):
            return None
        return Coordinates(float(lat), float(lon))

    async def reverse_geocode(self, coordinates: Coordinates) -> List[Address]:
        params = {
            "format": "jsonv2",
            "lat": str(coordinates.latitude),
            "lon": str(coordinates.longitude),
            "addressdetails": "1",
        }
        try:
            data = await self._get_json(self.reverse_url, params=params)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ReverseGeocodingError(f"Reverse geocoding failed: {e}") from e

        if data is None:
            raise ReverseGeocodingError("Reverse geocoding returned an error status")

        # Nominatim answers {"error": "Unable to geocode"} for open water etc.
        if not isinstance(data, dict) or "error" in data:
            return []

        address = data.get("address") or {}
        city = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("municipality")
        )
        candidate = Address(
            city=city,
            region=address.get("state") or address.get("region"),
            country=address.get("country"),
        )
        if not any((candidate.city, candidate.region, candidate.country)):
            return []
        return [candidate]

    async def cleanup(self) -> None:
        self._consent = None
