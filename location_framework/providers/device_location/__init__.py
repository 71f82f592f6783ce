"""
Device location providers.
"""

from .ip_geolocation import IPGeolocationProvider

__all__ = ['IPGeolocationProvider']
