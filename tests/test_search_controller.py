"""
Tests for SearchController: short queries, overlapping searches and failures.
"""

import asyncio

import pytest

from location_framework.core import SearchController
from location_framework.utils import ErrorSeverity, GeocodingError

from conftest import PARIS, TOKYO, settle


class TestShortQueries:
    """Queries shorter than two characters never reach the service."""

    async def test_single_character_clears_without_call(self, search_controller, geocoder):
        results = await search_controller.set_query("P")

        assert results == ()
        assert search_controller.results == ()
        assert search_controller.query == "P"
        assert geocoder.calls == []

    async def test_empty_query_clears_previous_results(self, search_controller, geocoder):
        await search_controller.set_query("Paris")
        assert search_controller.results == (PARIS,)

        await search_controller.set_query("")

        assert search_controller.results == ()
        assert geocoder.queries == ["Paris"]

    async def test_short_query_clears_before_any_await(self, search_controller, geocoder):
        await search_controller.set_query("Paris")
        task = asyncio.ensure_future(search_controller.set_query("P"))
        await asyncio.sleep(0)
        assert search_controller.results == ()
        await task


class TestSearching:

    async def test_search_uses_count_and_language(self, search_controller, geocoder):
        results = await search_controller.set_query("Tokyo")

        assert results == (TOKYO,)
        assert geocoder.calls == [("Tokyo", 5, "en")]

    async def test_config_overrides_limit_and_language(self, geocoder):
        controller = SearchController(geocoder, {"result_limit": 3, "language": "fr"})

        await controller.search("Paris")

        assert geocoder.calls == [("Paris", 3, "fr")]

    async def test_no_matches_gives_empty_results(self, search_controller):
        assert await search_controller.set_query("Atlantis") == ()

    async def test_on_change_receives_each_applied_set(self, geocoder):
        seen = []
        controller = SearchController(geocoder, on_change=seen.append)

        await controller.set_query("Paris")
        await controller.set_query("")

        assert seen == [(PARIS,), ()]


class TestOverlappingSearches:
    """Visible results always belong to the most recently issued query."""

    async def test_older_response_arriving_last_is_discarded(self, search_controller, geocoder):
        geocoder.hold = True
        first = asyncio.ensure_future(search_controller.set_query("Par"))
        await settle()
        second = asyncio.ensure_future(search_controller.set_query("Paris"))
        await settle()

        geocoder.release("Paris", [PARIS])
        await second
        geocoder.release("Par", [TOKYO])
        await first

        assert search_controller.results == (PARIS,)

    async def test_older_response_arriving_first_is_replaced(self, search_controller, geocoder):
        geocoder.hold = True
        first = asyncio.ensure_future(search_controller.set_query("Par"))
        await settle()
        second = asyncio.ensure_future(search_controller.set_query("Paris"))
        await settle()

        geocoder.release("Par", [TOKYO])
        await first
        assert search_controller.results == ()

        geocoder.release("Paris", [PARIS])
        await second
        assert search_controller.results == (PARIS,)

    async def test_clear_makes_in_flight_response_stale(self, search_controller, geocoder):
        geocoder.hold = True
        pending = asyncio.ensure_future(search_controller.set_query("Paris"))
        await settle()

        search_controller.clear()
        geocoder.release("Paris")
        await pending

        assert search_controller.results == ()
        assert search_controller.query == ""

    async def test_short_query_makes_in_flight_response_stale(self, search_controller, geocoder):
        geocoder.hold = True
        pending = asyncio.ensure_future(search_controller.set_query("Paris"))
        await settle()

        await search_controller.set_query("P")
        geocoder.release("Paris")
        await pending

        assert search_controller.results == ()

    async def test_is_searching_while_any_request_outstanding(self, search_controller, geocoder):
        geocoder.hold = True
        assert search_controller.is_searching is False

        first = asyncio.ensure_future(search_controller.set_query("Par"))
        second = asyncio.ensure_future(search_controller.set_query("Paris"))
        await settle()
        assert search_controller.is_searching is True

        geocoder.release("Paris")
        await second
        assert search_controller.is_searching is True

        geocoder.release("Par")
        await first
        assert search_controller.is_searching is False

    async def test_tokens_increase_per_request(self, search_controller):
        start = search_controller.latest_token
        await search_controller.set_query("Paris")
        await search_controller.set_query("P")
        search_controller.clear()

        assert search_controller.latest_token == start + 3


class TestDebounce:

    async def test_superseded_query_skips_service_call(self, geocoder):
        controller = SearchController(geocoder, {"debounce_seconds": 0.01})

        await asyncio.gather(
            controller.set_query("Pari"),
            controller.set_query("Paris"),
        )

        assert geocoder.queries == ["Paris"]
        assert controller.results == (PARIS,)


class TestFailures:

    async def test_service_error_clears_results_without_notice(
        self, search_controller, geocoder, error_handler, notifier
    ):
        await search_controller.set_query("Paris")
        geocoder.error = GeocodingError("HTTP 500")

        results = await search_controller.set_query("Tokyo")

        assert results == ()
        assert notifier.notices == []
        errors = error_handler.get_error_history("search")
        assert len(errors) == 1
        assert errors[0].severity == ErrorSeverity.WARNING

    async def test_stale_failure_does_not_touch_newer_results(self, search_controller, geocoder):
        geocoder.hold = True
        first = asyncio.ensure_future(search_controller.set_query("Par"))
        await settle()
        second = asyncio.ensure_future(search_controller.set_query("Paris"))
        await settle()

        geocoder.release("Paris")
        await second
        geocoder.fail("Par", GeocodingError("timeout"))
        await first

        assert search_controller.results == (PARIS,)

    async def test_unexpected_errors_propagate(self, search_controller, geocoder):
        geocoder.error = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await search_controller.set_query("Paris")
        assert search_controller.is_searching is False
