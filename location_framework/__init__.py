"""
Location Framework - saved-location management for a weather app.

This framework provides a clean abstraction layer for:
- Place search with stale-response suppression (Open-Meteo geocoding)
- Per-user saved locations (Supabase)
- Current device location capture with reverse geocoding
- Add-location and map panel state

Usage:
    from location_framework.config import get_framework_config
    from location_framework.screen import create_screen

    screen = await create_screen(get_framework_config(), notifier, confirmation, navigator)
    await screen.load()
"""

from .factory import ProviderFactory
from .config import get_framework_config
from .screen import LocationsScreen, create_screen
from . import interfaces
from . import models
from . import providers

__version__ = "1.0.0"

__all__ = [
    'LocationsScreen',
    'create_screen',
    'ProviderFactory',
    'get_framework_config',
    'interfaces',
    'models',
    'providers'
]
