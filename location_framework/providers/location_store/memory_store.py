"""
In-process saved-location store.

Same contract as the Supabase store, kept in a dict. Used by the "test" preset
and for running the CLI offline.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

try:
    from ...interfaces.location_store import LocationStoreInterface
    from ...models.data_models import SavedLocation
    from ...utils.error_handling import LocationStoreError, LocationNotFoundError
    from ...utils.logging_config import get_logger
except ImportError:
    from location_framework.interfaces.location_store import LocationStoreInterface
    from location_framework.models.data_models import SavedLocation
    from location_framework.utils.error_handling import LocationStoreError, LocationNotFoundError
    from location_framework.utils.logging_config import get_logger


logger = get_logger("store")


class InMemoryLocationStore(LocationStoreInterface):
    """
    Dict-backed location store.

    Configuration:
        - profiles: {user_id: {"first_name": ..., "last_name": ...}}
        - locations: Optional list of rows to preload
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or {}
        self._rows: Dict[str, SavedLocation] = {}
        self._profiles: Dict[str, Dict[str, str]] = dict(config.get("profiles") or {})
        self._last_created_at: Optional[datetime] = None

        for row in config.get("locations") or []:
            location = SavedLocation.from_row(row)
            self._rows[location.id] = location
            self._bump_clock(location.created_at)

    def _bump_clock(self, ts: datetime) -> None:
        if self._last_created_at is None or ts > self._last_created_at:
            self._last_created_at = ts

    def _next_timestamp(self) -> datetime:
        """Creation timestamps are strictly increasing per insert."""
        now = datetime.now(timezone.utc)
        if self._last_created_at is not None and now <= self._last_created_at:
            now = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = now
        return now

    async def initialize(self) -> bool:
        logger.info("In-memory location store ready (%d rows)", len(self._rows))
        return True

    async def list_locations(self, user_id: str) -> List[SavedLocation]:
        rows = [row for row in self._rows.values() if row.user_id == user_id]
        rows.sort(key=lambda row: row.created_at, reverse=True)
        return rows

    async def insert_location(
        self,
        user_id: str,
        name: str,
        latitude: float,
        longitude: float
    ) -> SavedLocation:
        try:
            location = SavedLocation(
                id=str(uuid.uuid4()),
                user_id=user_id,
                name=name,
                latitude=latitude,
                longitude=longitude,
                created_at=self._next_timestamp(),
            )
        except ValueError as e:
            raise LocationStoreError(f"Rejected row: {e}") from e

        self._rows[location.id] = location
        return location

    async def delete_location(self, location_id: str, user_id: str) -> None:
        row = self._rows.get(location_id)
        if row is None or row.user_id != user_id:
            raise LocationNotFoundError(f"No saved location {location_id} for this user")
        del self._rows[location_id]

    async def fetch_profile_name(self, user_id: str) -> Optional[str]:
        profile = self._profiles.get(user_id)
        if not profile:
            return None
        parts = [profile.get("first_name") or "", profile.get("last_name") or ""]
        return " ".join(part for part in parts if part).strip() or None

    async def cleanup(self) -> None:
        pass
