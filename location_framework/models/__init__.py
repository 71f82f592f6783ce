"""
Data models for the location framework.
"""

from .data_models import (
    FALLBACK_LOCATION_NAME,
    PermissionStatus,
    CaptureOutcome,
    PanelName,
    Coordinates,
    Address,
    SearchResult,
    SavedLocation,
    UserSession,
    WeatherRequest,
    PanelState,
    PanelTransition,
    parse_timestamp,
)

__all__ = [
    'FALLBACK_LOCATION_NAME',
    'PermissionStatus',
    'CaptureOutcome',
    'PanelName',
    'Coordinates',
    'Address',
    'SearchResult',
    'SavedLocation',
    'UserSession',
    'WeatherRequest',
    'PanelState',
    'PanelTransition',
    'parse_timestamp',
]
