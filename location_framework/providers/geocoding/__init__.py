"""
Geocoding providers for place search.
"""

from .open_meteo import OpenMeteoGeocodingProvider

__all__ = ['OpenMeteoGeocodingProvider']
