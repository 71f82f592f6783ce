"""
Locations screen: wires the session, store, geocoder and device collaborators
to the core components and exposes the actions a UI binds to.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from .config_models import FrameworkConfig
from .core import SearchController, SavedLocationRegistry, CurrentLocationCapture, PanelCoordinator
from .factory import ProviderFactory
from .interfaces import (
    GeocodingInterface,
    LocationStoreInterface,
    DeviceLocationInterface,
    SessionInterface,
    NotifierInterface,
    ConfirmationInterface,
    NavigatorInterface,
)
from .models import CaptureOutcome, SavedLocation, SearchResult, WeatherRequest
from .utils.error_handling import (
    ErrorHandler,
    ComponentError,
    ErrorSeverity,
    AuthenticationError,
    LocationStoreError,
    safe_cleanup,
)
from .utils.logging_config import get_logger


logger = get_logger("screen")


def format_saved_date(value: datetime) -> str:
    """Display format for "Saved on ..." lines, e.g. "Mar 05, 2024, 02:30 PM"."""
    return value.astimezone().strftime("%b %d, %Y, %I:%M %p")


class LocationsScreen:
    """
    The saved-locations screen.

    Owns no state of its own beyond the session identity and profile name;
    everything else lives in the core components it assembles.
    """

    def __init__(
        self,
        session: SessionInterface,
        store: LocationStoreInterface,
        geocoder: GeocodingInterface,
        device: DeviceLocationInterface,
        notifier: NotifierInterface,
        confirmation: ConfirmationInterface,
        navigator: NavigatorInterface,
        config: Optional[Dict[str, Any]] = None
    ):
        config = config or {}
        self.session = session
        self.store = store
        self.geocoder = geocoder
        self.device = device
        self.notifier = notifier
        self.confirmation = confirmation
        self.navigator = navigator

        self.error_handler = ErrorHandler(notifier)
        self.search = SearchController(geocoder, config.get("search"), self.error_handler)
        self.registry = SavedLocationRegistry(store, notifier, self.error_handler)
        self.capture = CurrentLocationCapture(device, self.registry, notifier, self.error_handler)
        self.panels = PanelCoordinator(self.search, self.registry, config.get("panels"))

        self._user_id: Optional[str] = None
        self._full_name = ""
        self._is_loading = False

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def full_name(self) -> str:
        return self._full_name

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def locations(self) -> Tuple[SavedLocation, ...]:
        return self.registry.locations

    async def initialize(self) -> bool:
        """Initialize all providers; False if any failed."""
        results = [
            await self.session.initialize(),
            await self.store.initialize(),
            await self.geocoder.initialize(),
            await self.device.initialize(),
        ]
        return all(results)

    async def load(self) -> bool:
        """
        Resolve the session, profile name and saved locations.

        Returns:
            False if there is no usable session (sent to sign-in)
        """
        self._is_loading = True
        try:
            try:
                user = await self.session.get_user()
            except AuthenticationError as e:
                await self.error_handler.handle_error(ComponentError(
                    component="session",
                    severity=ErrorSeverity.FATAL,
                    message="Unable to fetch user data",
                    exception=e,
                    user_message="Unable to fetch user data.",
                ))
                self.navigator.to_sign_in()
                return False

            self._user_id = user.user_id

            try:
                name = await self.store.fetch_profile_name(user.user_id)
            except LocationStoreError as e:
                name = None
                await self.error_handler.handle_error(ComponentError(
                    component="profile",
                    severity=ErrorSeverity.RECOVERABLE,
                    message="Unable to fetch user details",
                    exception=e,
                    user_message="Unable to fetch user details.",
                ))
            else:
                if name is None:
                    await self.error_handler.handle_error(ComponentError(
                        component="profile",
                        severity=ErrorSeverity.RECOVERABLE,
                        message="No profile row for user",
                        user_message="Unable to fetch user details.",
                    ))
            self._full_name = name or ""

            await self.registry.list(user.user_id)
            return True
        finally:
            self._is_loading = False

    async def refresh(self) -> Tuple[SavedLocation, ...]:
        """Pull-to-refresh."""
        return await self.registry.refresh()

    # ------------------------------------------------------------------
    # Add-Location panel
    # ------------------------------------------------------------------

    def toggle_add_panel(self):
        return self.panels.toggle_add_panel()

    async def set_query(self, text: str) -> Tuple[SearchResult, ...]:
        return await self.search.set_query(text)

    async def save_search_result(self, result: SearchResult) -> Optional[SavedLocation]:
        """Persist a selected search result, then close the add panel."""
        if not self._user_id:
            return None

        saved = await self.registry.create(
            self._user_id,
            result.display_name,
            result.latitude,
            result.longitude,
        )
        if saved:
            self.panels.close_add_panel()
        return saved

    # ------------------------------------------------------------------
    # Saved location actions
    # ------------------------------------------------------------------

    async def request_delete(self, location: SavedLocation) -> bool:
        """Ask for confirmation, then delete."""
        confirmed = await self.confirmation.ask(
            "Delete Location",
            f"Are you sure you want to delete {location.name}?",
            confirm_label="Delete",
            cancel_label="Cancel",
        )
        if not confirmed:
            logger.debug("Delete of %s cancelled", location.id)
            return False

        deleted = await self.registry.delete(location.id)
        selected = self.panels.selected_location
        if deleted and selected is not None and selected.id == location.id:
            self.panels.close_map()
        return deleted

    async def capture_current_location(self) -> CaptureOutcome:
        return await self.capture.capture_and_save(self._user_id)

    def toggle_map(self, location: Optional[SavedLocation] = None):
        return self.panels.toggle_map(location)

    def view_weather(self, location: SavedLocation) -> WeatherRequest:
        request = WeatherRequest.for_location(location)
        self.navigator.to_weather(request)
        return request

    async def logout(self) -> bool:
        try:
            await self.session.sign_out()
        except AuthenticationError as e:
            await self.error_handler.handle_error(ComponentError(
                component="session",
                severity=ErrorSeverity.RECOVERABLE,
                message="Error during logout",
                exception=e,
                user_message="Failed to sign out.",
            ))
            return False

        self._user_id = None
        self._full_name = ""
        self.panels.reset()
        self.registry.reset()
        self.navigator.to_sign_in()
        return True

    # ------------------------------------------------------------------
    # Diagnostics & lifecycle
    # ------------------------------------------------------------------

    def get_status(self) -> Dict[str, Any]:
        return {
            'user_id': self._user_id,
            'full_name': self._full_name,
            'saved_locations': len(self.registry.locations),
            'is_loading': self._is_loading or self.registry.is_loading,
            'is_refreshing': self.registry.is_refreshing,
            'is_searching': self.search.is_searching,
            'query': self.search.query,
            'panels': self.panels.get_status(),
            'errors': self.error_handler.get_error_summary(),
        }

    async def cleanup(self) -> None:
        await safe_cleanup(
            self.geocoder.cleanup,
            self.device.cleanup,
            self.store.cleanup,
            self.session.cleanup,
        )


async def create_screen(
    config: Dict[str, Any],
    notifier: NotifierInterface,
    confirmation: ConfirmationInterface,
    navigator: NavigatorInterface
) -> LocationsScreen:
    """
    Validate config, build providers and return an initialized screen.

    Raises:
        ValueError: If the configuration is invalid
    """
    FrameworkConfig.from_framework_dict(config)

    session = ProviderFactory.create_session_provider(
        config["session"]["provider"], config["session"]["config"]
    )
    store = ProviderFactory.create_store_provider(
        config["store"]["provider"], config["store"]["config"], session=session
    )
    geocoder = ProviderFactory.create_geocoding_provider(
        config["geocoding"]["provider"], config["geocoding"]["config"]
    )
    device = ProviderFactory.create_device_location_provider(
        config["device_location"]["provider"],
        config["device_location"]["config"],
        consent_prompt=confirmation,
    )

    screen = LocationsScreen(
        session, store, geocoder, device,
        notifier, confirmation, navigator,
        config=config,
    )
    if not await screen.initialize():
        logger.warning("One or more providers failed to initialize")
    return screen
