"""
Search controller: query text, debounced search and stale-response handling.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..interfaces.geocoding import GeocodingInterface
from ..models.data_models import SearchResult
from ..utils.error_handling import ErrorHandler, ComponentError, ErrorSeverity, GeocodingError
from ..utils.logging_config import get_logger


logger = get_logger("search")


class SearchController:
    """
    Owns the query text and the visible result set.

    Every search takes a sequence token when it is issued. A response is
    applied only if its token is still the latest one, so a slow answer for a
    superseded query never overwrites the results of a newer one. Clearing the
    query also advances the token.

    Configuration:
        min_query_length: Shorter queries clear results without a call (default 2)
        result_limit: Candidates requested per search (default 5)
        language: Response language (default "en")
        debounce_seconds: Wait before calling the service; superseded queries
            are dropped without a call (default 0, no wait)
    """

    def __init__(
        self,
        geocoder: GeocodingInterface,
        config: Optional[Dict[str, Any]] = None,
        error_handler: Optional[ErrorHandler] = None,
        on_change: Optional[Callable[[Tuple[SearchResult, ...]], None]] = None
    ):
        config = config or {}
        self._geocoder = geocoder
        self._error_handler = error_handler or ErrorHandler()
        self._on_change = on_change

        self.min_query_length = int(config.get("min_query_length", 2))
        self.result_limit = int(config.get("result_limit", 5))
        self.language = config.get("language", "en")
        self.debounce_seconds = float(config.get("debounce_seconds", 0.0))

        self._query = ""
        self._results: Tuple[SearchResult, ...] = ()
        self._latest_token = 0
        self._in_flight = 0

    @property
    def query(self) -> str:
        return self._query

    @property
    def results(self) -> Tuple[SearchResult, ...]:
        return self._results

    @property
    def is_searching(self) -> bool:
        """True while any issued request has not completed."""
        return self._in_flight > 0

    @property
    def latest_token(self) -> int:
        return self._latest_token

    def _issue_token(self) -> int:
        self._latest_token += 1
        return self._latest_token

    def _apply(self, results: List[SearchResult]) -> None:
        self._results = tuple(results)
        if self._on_change:
            self._on_change(self._results)

    def clear(self) -> None:
        """Reset query and results; in-flight responses become stale."""
        self._issue_token()
        self._query = ""
        self._apply([])

    async def set_query(self, text: str) -> Tuple[SearchResult, ...]:
        """Update the query text and search for it."""
        self._query = text
        return await self.search(text)

    async def search(self, query: str) -> Tuple[SearchResult, ...]:
        """
        Run one search and apply it if it is still the latest request.

        Returns:
            The visible result set after this call completes
        """
        token = self._issue_token()

        if len(query) < self.min_query_length:
            self._apply([])
            return self._results

        if self.debounce_seconds > 0:
            await asyncio.sleep(self.debounce_seconds)
            if token != self._latest_token:
                logger.debug("Query %r superseded during debounce, skipping call", query)
                return self._results

        self._in_flight += 1
        try:
            results = await self._geocoder.search(
                query,
                count=self.result_limit,
                language=self.language,
            )
        except GeocodingError as e:
            await self._error_handler.handle_error(ComponentError(
                component="search",
                severity=ErrorSeverity.WARNING,
                message=f"Error searching locations for {query!r}",
                exception=e,
                context={"query": query, "token": token},
            ))
            results = []
        finally:
            self._in_flight -= 1

        if token != self._latest_token:
            logger.bind(token=token, latest=self._latest_token).debug(
                "Discarding stale results for %r", query)
            return self._results

        self._apply(results)
        return self._results
