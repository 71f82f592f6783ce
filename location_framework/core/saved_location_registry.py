"""
Saved location registry: the authoritative in-memory list of the current
user's saved locations, re-fetched in full after every mutation.
"""

from typing import Callable, List, Optional, Tuple

from ..interfaces.location_store import LocationStoreInterface
from ..interfaces.presentation import NotifierInterface
from ..models.data_models import SavedLocation
from ..utils.error_handling import ErrorHandler, ComponentError, ErrorSeverity, LocationStoreError
from ..utils.logging_config import get_logger


logger = get_logger("registry")

SAVE_FAILED_MESSAGE = "Unable to save location. Please try again."
DELETE_FAILED_MESSAGE = "Unable to delete location. Please try again."
FETCH_FAILED_MESSAGE = "Unable to fetch your saved locations."


class SavedLocationRegistry:
    """
    Owns the list of SavedLocation for the current user.

    The list is only ever replaced wholesale. Concurrent refreshes resolve as
    last-completion-wins, which is safe because each fetch returns the full
    authoritative set.
    """

    def __init__(
        self,
        store: LocationStoreInterface,
        notifier: Optional[NotifierInterface] = None,
        error_handler: Optional[ErrorHandler] = None,
        on_change: Optional[Callable[[Tuple[SavedLocation, ...]], None]] = None
    ):
        self._store = store
        self._notifier = notifier
        self._error_handler = error_handler or ErrorHandler(notifier)
        self._on_change = on_change

        self._user_id: Optional[str] = None
        self._locations: Tuple[SavedLocation, ...] = ()
        # In-flight counts; a mutation's re-fetch must not end a pending pull-to-refresh
        self._loads_in_flight = 0
        self._refreshes_in_flight = 0

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def locations(self) -> Tuple[SavedLocation, ...]:
        return self._locations

    @property
    def is_loading(self) -> bool:
        return self._loads_in_flight > 0

    @property
    def is_refreshing(self) -> bool:
        return self._refreshes_in_flight > 0

    def get(self, location_id: str) -> Optional[SavedLocation]:
        for location in self._locations:
            if location.id == location_id:
                return location
        return None

    def reset(self) -> None:
        """Forget the user and the list (sign-out)."""
        self._user_id = None
        self._replace([])

    def _replace(self, locations: List[SavedLocation]) -> None:
        self._locations = tuple(locations)
        if self._on_change:
            self._on_change(self._locations)

    async def list(self, user_id: str) -> Tuple[SavedLocation, ...]:
        """
        Fetch all saved locations for a user, newest first.

        On failure the previously held list is kept and the user is notified.
        """
        self._user_id = user_id
        self._loads_in_flight += 1
        try:
            rows = await self._store.list_locations(user_id)
        except LocationStoreError as e:
            await self._error_handler.handle_error(ComponentError(
                component="registry",
                severity=ErrorSeverity.RECOVERABLE,
                message="Error fetching saved locations",
                exception=e,
                context={"user_id": user_id},
                user_message=FETCH_FAILED_MESSAGE,
            ))
            return self._locations
        finally:
            self._loads_in_flight -= 1

        log = logger.bind(user=user_id)
        owned = [row for row in rows if row.user_id == user_id]
        if len(owned) != len(rows):
            log.warning("Dropped %d rows not owned by the current user", len(rows) - len(owned))

        # A newer list for a different user may have started meanwhile
        if user_id != self._user_id:
            log.debug("Ignoring saved locations fetched for a previous user")
            return self._locations

        owned.sort(key=lambda row: row.created_at, reverse=True)
        self._replace(owned)
        return self._locations

    async def refresh(self) -> Tuple[SavedLocation, ...]:
        """Re-run list for the current user (pull-to-refresh and post-mutation)."""
        if not self._user_id:
            return self._locations
        self._refreshes_in_flight += 1
        try:
            return await self.list(self._user_id)
        finally:
            self._refreshes_in_flight -= 1

    async def _refuse(self, message: str, context: dict, user_message: str) -> None:
        await self._error_handler.handle_error(ComponentError(
            component="registry",
            severity=ErrorSeverity.RECOVERABLE,
            message=message,
            context=context,
            user_message=user_message,
        ))

    async def create(
        self,
        user_id: Optional[str],
        name: str,
        latitude: float,
        longitude: float,
        success_message: Optional[str] = None,
        failure_message: str = SAVE_FAILED_MESSAGE
    ) -> Optional[SavedLocation]:
        """
        Insert one location, then refresh the list.

        Returns:
            The stored location, or None if nothing was written
        """
        if not user_id:
            # Unreachable through the UI; refused without a notice
            logger.warning("Save refused: no authenticated user")
            return None

        if not name or not name.strip():
            await self._refuse("Save refused: empty location name", {"user_id": user_id}, failure_message)
            return None
        if not (-90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0):
            await self._refuse(
                "Save refused: coordinates out of range",
                {"name": name, "latitude": latitude, "longitude": longitude},
                failure_message,
            )
            return None

        try:
            saved = await self._store.insert_location(user_id, name, latitude, longitude)
        except LocationStoreError as e:
            await self._error_handler.handle_error(ComponentError(
                component="registry",
                severity=ErrorSeverity.RECOVERABLE,
                message="Error saving location",
                exception=e,
                context={"name": name},
                user_message=failure_message,
            ))
            return None

        logger.bind(user=user_id, location=saved.id).info("Saved location %r", name)
        if self._notifier:
            self._notifier.notify(
                "Success",
                success_message or f"{name} has been saved to your locations.",
            )

        await self.list(user_id)
        return saved

    async def delete(self, location_id: str) -> bool:
        """
        Remove one of the current user's locations, then refresh the list.

        Confirmation is the caller's job.
        """
        if not self._user_id:
            logger.warning("Delete refused: no authenticated user")
            return False

        try:
            await self._store.delete_location(location_id, self._user_id)
        except LocationStoreError as e:
            await self._error_handler.handle_error(ComponentError(
                component="registry",
                severity=ErrorSeverity.RECOVERABLE,
                message="Error deleting location",
                exception=e,
                context={"location_id": location_id},
                user_message=DELETE_FAILED_MESSAGE,
            ))
            return False

        logger.bind(user=self._user_id, location=location_id).info("Deleted location")
        await self.list(self._user_id)
        return True
