"""
Tests for the Open-Meteo geocoding provider (HTTP mocked).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from location_framework.models import SearchResult
from location_framework.providers import OpenMeteoGeocodingProvider
from location_framework.utils import GeocodingError


CLIENT_SESSION = "location_framework.providers.geocoding.open_meteo.aiohttp.ClientSession"


def _mock_http(status=200, payload=None, error=None):
    """Build a ClientSession stand-in whose get() yields one response."""
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=payload)

    request_ctx = MagicMock()
    request_ctx.__aenter__ = AsyncMock(return_value=response)
    request_ctx.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    if error is not None:
        session.get = MagicMock(side_effect=error)
    else:
        session.get = MagicMock(return_value=request_ctx)

    session_ctx = MagicMock()
    session_ctx.__aenter__ = AsyncMock(return_value=session)
    session_ctx.__aexit__ = AsyncMock(return_value=False)
    return session_ctx, session


class TestOpenMeteoSearch:

    @pytest.fixture
    def provider(self):
        return OpenMeteoGeocodingProvider({"request_timeout": 5.0})

    async def test_parses_results_in_service_order(self, provider):
        payload = {"results": [
            {"id": 1, "name": "Paris", "country": "France", "latitude": 48.85341, "longitude": 2.3488},
            {"id": 2, "name": "Paris", "country": "United States", "latitude": 33.66094, "longitude": -95.55551},
        ]}
        session_ctx, session = _mock_http(payload=payload)

        with patch(CLIENT_SESSION, return_value=session_ctx):
            results = await provider.search("Paris")

        assert results == [
            SearchResult("Paris", "France", 48.85341, 2.3488),
            SearchResult("Paris", "United States", 33.66094, -95.55551),
        ]
        assert results[1].display_name == "Paris, United States"

    async def test_sends_query_parameters(self, provider):
        session_ctx, session = _mock_http(payload={"results": []})

        with patch(CLIENT_SESSION, return_value=session_ctx):
            await provider.search("Tokyo", count=3, language="de")

        url = session.get.call_args.args[0]
        params = session.get.call_args.kwargs["params"]
        assert url == "https://geocoding-api.open-meteo.com/v1/search"
        assert params == {"name": "Tokyo", "count": "3", "language": "de", "format": "json"}

    async def test_missing_results_key_means_no_matches(self, provider):
        session_ctx, _ = _mock_http(payload={"generationtime_ms": 0.5})

        with patch(CLIENT_SESSION, return_value=session_ctx):
            assert await provider.search("Atlantis") == []

    async def test_malformed_rows_are_skipped(self, provider):
        payload = {"results": [
            {"name": "Lyon", "country": "France", "latitude": 45.75, "longitude": 4.85},
            {"name": "Broken"},
            {"name": "Nowhere", "latitude": "north", "longitude": 0},
        ]}
        session_ctx, _ = _mock_http(payload=payload)

        with patch(CLIENT_SESSION, return_value=session_ctx):
            results = await provider.search("Ly")

        assert [r.name for r in results] == ["Lyon"]

    async def test_missing_country_is_allowed(self, provider):
        payload = {"results": [{"name": "Antarctica Station", "latitude": -75.0, "longitude": 0.0}]}
        session_ctx, _ = _mock_http(payload=payload)

        with patch(CLIENT_SESSION, return_value=session_ctx):
            results = await provider.search("Antarctica")

        assert results[0].country is None
        assert results[0].display_name == "Antarctica Station"

    async def test_non_200_raises(self, provider):
        session_ctx, _ = _mock_http(status=500, payload={})

        with patch(CLIENT_SESSION, return_value=session_ctx):
            with pytest.raises(GeocodingError):
                await provider.search("Paris")

    async def test_transport_error_raises(self, provider):
        session_ctx, _ = _mock_http(error=aiohttp.ClientConnectionError("refused"))

        with patch(CLIENT_SESSION, return_value=session_ctx):
            with pytest.raises(GeocodingError):
                await provider.search("Paris")
        assert provider.in_flight is False

    async def test_unexpected_shape_raises(self, provider):
        session_ctx, _ = _mock_http(payload=["not", "a", "dict"])

        with patch(CLIENT_SESSION, return_value=session_ctx):
            with pytest.raises(GeocodingError):
                await provider.search("Paris")

    async def test_timeout_configured_on_session(self, provider):
        session_ctx, _ = _mock_http(payload={})

        with patch(CLIENT_SESSION, return_value=session_ctx) as client_session:
            await provider.search("Paris")

        timeout = client_session.call_args.kwargs["timeout"]
        assert timeout.total == 5.0

    async def test_no_timeout_when_disabled(self):
        provider = OpenMeteoGeocodingProvider({"request_timeout": None})
        session_ctx, _ = _mock_http(payload={})

        with patch(CLIENT_SESSION, return_value=session_ctx) as client_session:
            await provider.search("Paris")

        assert "timeout" not in client_session.call_args.kwargs
