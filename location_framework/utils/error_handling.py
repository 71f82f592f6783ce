"""
Structured error handling for the location framework.

Providers raise the exceptions defined here; core components catch them at the
operation boundary and hand a ComponentError to the ErrorHandler, which logs it
and forwards any user-facing notice to the notifier.
"""

import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Callable, Dict, Any, List, TYPE_CHECKING
from datetime import datetime

from .logging_config import get_logger

if TYPE_CHECKING:
    from ..interfaces.presentation import NotifierInterface


logger = get_logger("errors")


# =============================================================================
# Exception taxonomy
# =============================================================================

class LocationFrameworkError(Exception):
    """Base class for all framework errors."""


class AuthenticationError(LocationFrameworkError):
    """No usable identity (session missing, expired, or sign-out failed)."""


class ServiceError(LocationFrameworkError):
    """A remote service or device primitive failed."""


class GeocodingError(ServiceError):
    """Place search failed (transport, non-2xx, or malformed response)."""


class LocationStoreError(ServiceError):
    """Persistent store operation failed."""


class LocationNotFoundError(LocationStoreError):
    """No saved location with the given identifier for this user."""


class DeviceLocationError(ServiceError):
    """Permission request or position fix failed."""


class ReverseGeocodingError(DeviceLocationError):
    """Coordinates could not be turned into an address."""


# =============================================================================
# Structured error records
# =============================================================================

class ErrorSeverity(Enum):
    """Error severity levels."""
    WARNING = "warning"          # Log and continue, nothing shown to the user
    RECOVERABLE = "recoverable"  # Operation aborted, user notified
    FATAL = "fatal"              # Screen cannot continue (e.g. no session)


@dataclass
class ComponentError:
    """Structured error information."""
    component: str
    severity: ErrorSeverity
    message: str
    exception: Optional[Exception] = None
    context: Dict[str, Any] = field(default_factory=dict)
    title: str = "Error"
    user_message: Optional[str] = None
    timestamp: float = field(default_factory=lambda: datetime.now().timestamp())
    traceback_str: Optional[str] = None

    def __post_init__(self):
        """Capture traceback if exception provided."""
        if self.exception and not self.traceback_str:
            self.traceback_str = ''.join(
                traceback.format_exception(
                    type(self.exception),
                    self.exception,
                    self.exception.__traceback__
                )
            )


class ErrorHandler:
    """
    Centralized error handling.

    Features:
    - Severity-based logging
    - User-facing notices through an optional notifier
    - Error history tracking
    """

    def __init__(self, notifier: Optional["NotifierInterface"] = None, max_history: int = 100):
        self.notifier = notifier
        self._error_log: List[ComponentError] = []
        self._max_history = max_history

    async def handle_error(self, error: ComponentError) -> bool:
        """
        Handle error based on severity.

        Args:
            error: Error to handle

        Returns:
            True if the caller may continue, False if fatal
        """
        self._error_log.append(error)
        if len(self._error_log) > self._max_history:
            self._error_log.pop(0)

        if error.severity == ErrorSeverity.WARNING:
            self._log_warning(error)
            handled = True
        elif error.severity == ErrorSeverity.RECOVERABLE:
            self._log_recoverable(error)
            handled = True
        else:  # FATAL
            self._log_fatal(error)
            handled = False

        self._notify(error)
        return handled

    def _log_warning(self, error: ComponentError) -> None:
        log = logger.bind(**error.context)
        if error.exception:
            log.warning("%s: %s (%s)", error.component, error.message, error.exception)
        else:
            log.warning("%s: %s", error.component, error.message)

    def _log_recoverable(self, error: ComponentError) -> None:
        log = logger.bind(**error.context)
        if error.exception:
            log.error("%s: %s (%s)", error.component, error.message, error.exception)
        else:
            log.error("%s: %s", error.component, error.message)

    def _log_fatal(self, error: ComponentError) -> None:
        logger.critical("FATAL ERROR in %s: %s", error.component, error.message)
        if error.traceback_str:
            logger.debug("Traceback:\n%s", error.traceback_str)

    def _notify(self, error: ComponentError) -> None:
        if not error.user_message or self.notifier is None:
            return
        try:
            self.notifier.notify(error.title, error.user_message)
        except Exception as e:
            logger.warning("Notifier failed for %s: %s", error.component, e)

    def get_error_history(self, component: Optional[str] = None) -> List[ComponentError]:
        """
        Get error history, optionally filtered by component.

        Args:
            component: Optional component name to filter by

        Returns:
            List of errors
        """
        if component:
            return [e for e in self._error_log if e.component == component]
        return self._error_log.copy()

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of errors."""
        summary = {
            'total_errors': len(self._error_log),
            'by_severity': {},
            'by_component': {}
        }

        for error in self._error_log:
            severity = error.severity.value
            summary['by_severity'][severity] = summary['by_severity'].get(severity, 0) + 1

            component = error.component
            summary['by_component'][component] = summary['by_component'].get(component, 0) + 1

        return summary


async def safe_cleanup(*cleanup_funcs: Callable):
    """
    Safely run multiple cleanup functions, ensuring all run even if some fail.

    Args:
        *cleanup_funcs: Async cleanup functions to run
    """
    errors = []

    for func in cleanup_funcs:
        try:
            await func()
        except Exception as e:
            errors.append((func.__name__, e))
            logger.warning("Cleanup error in %s: %s", func.__name__, e)

    if errors:
        logger.warning("%d cleanup errors occurred", len(errors))
