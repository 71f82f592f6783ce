"""
Supabase saved-location store provider.

Required Supabase setup: see create_table_sql. Row level security should limit
every row to auth.uid(); the provider also filters on the owning user itself.
"""

import asyncio
import os
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from supabase import create_client, Client

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


class SupabaseLocationStore(LocationStoreInterface):
    """
    Supabase implementation of the saved-location store.

    Configuration:
        - url: Supabase project URL
        - key: Supabase anon key (user-scoped through the session's JWT)
        - table_name: Saved locations table (default: saved_locations)
        - profile_table: Profile table (default: user_details)
        - client: Optional pre-built client, shared with the auth session
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the Supabase location store.

        Args:
            config: Configuration dict
        """
        self.url = config.get("url") or os.getenv("SUPABASE_URL")
        self.key = config.get("key") or os.getenv("SUPABASE_KEY")

        self._client: Optional[Client] = config.get("client")

        if self._client is None and (not self.url or not self.key):
            raise ValueError("Supabase URL and key are required")

        self.table_name = config.get("table_name", "saved_locations")
        self.profile_table = config.get("profile_table", "user_details")
        self._initialized = self._client is not None

    @property
    def create_table_sql(self) -> str:
        """SQL to create the tables. Run this in Supabase SQL editor."""
        return f"""
CREATE TABLE IF NOT EXISTS {self.profile_table} (
    uuid UUID PRIMARY KEY REFERENCES auth.users(id) ON DELETE CASCADE,
    first_name TEXT,
    last_name TEXT
);

CREATE TABLE IF NOT EXISTS {self.table_name} (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    user_id UUID NOT NULL REFERENCES auth.users(id) ON DELETE CASCADE,
    name TEXT NOT NULL CHECK (length(name) > 0),
    latitude DOUBLE PRECISION NOT NULL CHECK (latitude BETWEEN -90 AND 90),
    longitude DOUBLE PRECISION NOT NULL CHECK (longitude BETWEEN -180 AND 180),
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS {self.table_name}_user_created_idx
ON {self.table_name} (user_id, created_at DESC);

ALTER TABLE {self.table_name} ENABLE ROW LEVEL SECURITY;

CREATE POLICY "{self.table_name}_owner" ON {self.table_name}
    FOR ALL USING (auth.uid() = user_id) WITH CHECK (auth.uid() = user_id);
"""

    async def initialize(self) -> bool:
        """Initialize the Supabase client."""
        try:
            self._ensure_initialized()
            logger.info("Supabase location store initialized (table: %s)", self.table_name)
            return True
        except Exception as e:
            logger.error("Failed to initialize Supabase location store: %s", e)
            return False

    def _ensure_initialized(self):
        if not self._initialized or not self._client:
            self._client = create_client(self.url, self.key)
            self._initialized = True

    async def _execute(self, build: Callable[[], Any]) -> Any:
        """Run a blocking supabase query off the event loop."""
        self._ensure_initialized()
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, build)

    async def list_locations(self, user_id: str) -> List[SavedLocation]:
        """Fetch a user's saved locations, newest first."""
        try:
            response = await self._execute(
                lambda: self._client.table(self.table_name)
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise LocationStoreError(f"Fetching saved locations failed: {e}") from e

        try:
            return [SavedLocation.from_row(row) for row in response.data or []]
        except (KeyError, TypeError, ValueError) as e:
            raise LocationStoreError(f"Malformed saved location row: {e}") from e

    async def insert_location(
        self,
        user_id: str,
        name: str,
        latitude: float,
        longitude: float
    ) -> SavedLocation:
        """Insert one row; id and created_at are assigned by the database."""
        data = {
            "user_id": user_id,
            "name": name,
            "latitude": latitude,
            "longitude": longitude,
        }

        try:
            response = await self._execute(
                lambda: self._client.table(self.table_name).insert([data]).execute()
            )
        except Exception as e:
            raise LocationStoreError(f"Saving location failed: {e}") from e

        if not response.data:
            raise LocationStoreError("Insert returned no row")

        try:
            return SavedLocation.from_row(response.data[0])
        except (KeyError, TypeError, ValueError) as e:
            raise LocationStoreError(f"Malformed inserted row: {e}") from e

    async def delete_location(self, location_id: str, user_id: str) -> None:
        """Delete one of the user's rows by id."""
        try:
            response = await self._execute(
                partial(self._delete_query, location_id, user_id)
            )
        except Exception as e:
            raise LocationStoreError(f"Deleting location failed: {e}") from e

        if not response.data:
            raise LocationNotFoundError(f"No saved location {location_id} for this user")

    def _delete_query(self, location_id: str, user_id: str) -> Any:
        return (
            self._client.table(self.table_name)
            .delete()
            .eq("id", location_id)
            .eq("user_id", user_id)
            .execute()
        )

    async def fetch_profile_name(self, user_id: str) -> Optional[str]:
        """Read "first last" from the profile table."""
        try:
            response = await self._execute(
                lambda: self._client.table(self.profile_table)
                .select("first_name, last_name")
                .eq("uuid", user_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise LocationStoreError(f"Fetching user details failed: {e}") from e

        if not response.data:
            return None

        row = response.data[0]
        parts = [row.get("first_name") or "", row.get("last_name") or ""]
        full_name = " ".join(part for part in parts if part).strip()
        return full_name or None

    async def cleanup(self) -> None:
        """Clean up resources."""
        self._client = None
        self._initialized = False
