from __future__ import annotations

import requests

from moviecast_backend.cache import FORECAST_TTL_SECONDS, ResponseCache
from moviecast_backend.integrations.http import DEFAULT_TIMEOUT_SECONDS, CachingApiClient
from moviecast_backend.models.forecast import ForecastResult

OPEN_METEO_BASE_URL = "https://api.open-meteo.com/v1"
DAILY_METRICS = "temperature_2m_max,temperature_2m_min"


def forecast_cache_key(latitude: float, longitude: float) -> str:
    return f"weather::{latitude:.6f}::{longitude:.6f}"


class OpenMeteoClient(CachingApiClient):
    """
    Daily max/min temperature forecast for a coordinate pair.

    Coordinates are passed through unvalidated; out-of-range values make the
    provider fail, which surfaces as `None`.
    """

    provider_name = "Open-Meteo"

    def __init__(
        self,
        cache: ResponseCache,
        *,
        session: requests.Session | None = None,
        base_url: str = OPEN_METEO_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(cache, base_url=base_url, session=session, timeout_seconds=timeout_seconds)

    async def get_forecast(self, latitude: float, longitude: float) -> ForecastResult | None:
        return await self._fetch(
            cache_key=forecast_cache_key(latitude, longitude),
            label="forecast",
            path="forecast",
            params={
                "latitude": latitude,
                "longitude": longitude,
                "daily": DAILY_METRICS,
                "timezone": "auto",
            },
            parse=ForecastResult.model_validate,
            ttl_seconds=FORECAST_TTL_SECONDS,
        )
