"""
Open-Meteo weather forecast client.
"""

from moviecast_backend.integrations.open_meteo.client import OpenMeteoClient, forecast_cache_key

__all__ = [
    "OpenMeteoClient",
    "forecast_cache_key",
]
