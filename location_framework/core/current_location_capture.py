"""
One-shot capture of the device position as a new saved location.
"""

from typing import Optional

from ..interfaces.device_location import DeviceLocationInterface
from ..interfaces.presentation import NotifierInterface
from ..models.data_models import (
    Coordinates,
    CaptureOutcome,
    PermissionStatus,
    FALLBACK_LOCATION_NAME,
)
from ..utils.error_handling import (
    ErrorHandler,
    ComponentError,
    ErrorSeverity,
    DeviceLocationError,
)
from ..utils.logging_config import get_logger
from .saved_location_registry import SavedLocationRegistry


logger = get_logger("capture")

PERMISSION_DENIED_MESSAGE = "Location permission is required to use this feature."
CAPTURE_FAILED_MESSAGE = "Unable to get your current location."
CAPTURE_SAVED_MESSAGE = "Your current location has been saved."
CAPTURE_SAVE_FAILED_MESSAGE = "Unable to save your current location."


class CurrentLocationCapture:
    """
    permission -> position fix -> reverse geocode -> name -> registry.create

    Nothing is written unless both the fix and the insert succeed. A failed or
    empty reverse geocode only changes the name to "Current Location".
    """

    def __init__(
        self,
        provider: DeviceLocationInterface,
        registry: SavedLocationRegistry,
        notifier: Optional[NotifierInterface] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        self._provider = provider
        self._registry = registry
        self._error_handler = error_handler or ErrorHandler(notifier)
        self._is_capturing = False

    @property
    def is_capturing(self) -> bool:
        return self._is_capturing

    async def capture_and_save(self, user_id: Optional[str]) -> CaptureOutcome:
        if not user_id:
            logger.warning("Current location capture refused: no authenticated user")
            return CaptureOutcome.NO_IDENTITY

        self._is_capturing = True
        try:
            return await self._capture(user_id)
        finally:
            self._is_capturing = False

    async def _capture(self, user_id: str) -> CaptureOutcome:
        try:
            status = await self._provider.request_permission()
        except DeviceLocationError as e:
            await self._report_capture_failure("Permission request failed", e)
            return CaptureOutcome.CAPTURE_FAILED

        if status != PermissionStatus.GRANTED:
            await self._error_handler.handle_error(ComponentError(
                component="capture",
                severity=ErrorSeverity.RECOVERABLE,
                message="Location permission denied",
                title="Permission Denied",
                user_message=PERMISSION_DENIED_MESSAGE,
            ))
            return CaptureOutcome.PERMISSION_DENIED

        try:
            coordinates = await self._provider.get_current_position()
        except DeviceLocationError as e:
            await self._report_capture_failure("Error getting current location", e)
            return CaptureOutcome.CAPTURE_FAILED

        name = await self.resolve_name(coordinates)
        logger.bind(user=user_id).debug(
            "Captured %.4f, %.4f as %r", coordinates.latitude, coordinates.longitude, name)

        saved = await self._registry.create(
            user_id,
            name,
            coordinates.latitude,
            coordinates.longitude,
            success_message=CAPTURE_SAVED_MESSAGE,
            failure_message=CAPTURE_SAVE_FAILED_MESSAGE,
        )
        return CaptureOutcome.SAVED if saved else CaptureOutcome.SAVE_FAILED

    async def resolve_name(self, coordinates: Coordinates) -> str:
        """Display name for a position; never fails."""
        try:
            addresses = await self._provider.reverse_geocode(coordinates)
        except DeviceLocationError as e:
            await self._error_handler.handle_error(ComponentError(
                component="capture",
                severity=ErrorSeverity.WARNING,
                message="Reverse geocoding failed, using fallback name",
                exception=e,
            ))
            return FALLBACK_LOCATION_NAME

        if not addresses:
            logger.info("Reverse geocoding found no address, using fallback name")
            return FALLBACK_LOCATION_NAME

        return addresses[0].display_name()

    async def _report_capture_failure(self, message: str, exception: Exception) -> None:
        await self._error_handler.handle_error(ComponentError(
            component="capture",
            severity=ErrorSeverity.RECOVERABLE,
            message=message,
            exception=exception,
            user_message=CAPTURE_FAILED_MESSAGE,
        ))
