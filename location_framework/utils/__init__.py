# Utils package

from .logging_config import setup_logging, get_logger, ComponentLogger, StructuredFormatter
from .error_handling import (
    ErrorHandler,
    ErrorSeverity,
    ComponentError,
    safe_cleanup,
    LocationFrameworkError,
    AuthenticationError,
    ServiceError,
    GeocodingError,
    LocationStoreError,
    LocationNotFoundError,
    DeviceLocationError,
    ReverseGeocodingError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "ComponentLogger",
    "StructuredFormatter",
    "ErrorHandler",
    "ErrorSeverity",
    "ComponentError",
    "safe_cleanup",
    "LocationFrameworkError",
    "AuthenticationError",
    "ServiceError",
    "GeocodingError",
    "LocationStoreError",
    "LocationNotFoundError",
    "DeviceLocationError",
    "ReverseGeocodingError",
]
