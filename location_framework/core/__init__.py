"""
Saved-location lifecycle core.
"""

from .search_controller import SearchController
from .saved_location_registry import SavedLocationRegistry
from .current_location_capture import CurrentLocationCapture
from .panel_coordinator import PanelCoordinator

__all__ = [
    'SearchController',
    'SavedLocationRegistry',
    'CurrentLocationCapture',
    'PanelCoordinator',
]
