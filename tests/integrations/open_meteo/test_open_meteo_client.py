from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from moviecast_backend.cache import ResponseCache
from moviecast_backend.integrations.open_meteo.client import OpenMeteoClient, forecast_cache_key
from moviecast_backend.models.forecast import DailyTemperature, ForecastResult

REPO_ROOT = Path(__file__).resolve().parents[3]
FORECAST_PAYLOAD = json.loads(
    (REPO_ROOT / "tests" / "fixtures" / "open_meteo" / "forecast_sample.json").read_text(encoding="utf-8")
)


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _ok(payload):
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = payload
    resp.text = json.dumps(payload)
    return resp


def _error(status_code: int):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = {"error": True, "reason": "Latitude must be in range of -90 to 90°."}
    resp.text = '{"error": true}'
    return resp


def _run_async(coro):
    return asyncio.run(coro)


def test_forecast_cache_key_rounds_to_six_decimals() -> None:
    assert forecast_cache_key(-23.5505199, -46.6333094) == "weather::-23.550520::-46.633309"
    assert forecast_cache_key(1, 2) == "weather::1.000000::2.000000"


def test_forecast_is_parsed_from_daily_arrays() -> None:
    session = MagicMock()
    session.get.return_value = _ok(FORECAST_PAYLOAD)
    client = OpenMeteoClient(ResponseCache(), session=session)

    forecast = _run_async(client.get_forecast(-23.55, -46.63))

    assert isinstance(forecast, ForecastResult)
    assert forecast.timezone == "America/Sao_Paulo"
    assert forecast.utc_offset_seconds == -10800
    assert len(forecast.dates) == 7
    days = list(forecast.days())
    assert days[0] == DailyTemperature(date="2026-10-19", temperature_max=27.4, temperature_min=16.2)

    args, kwargs = session.get.call_args
    assert args[0] == "https://api.open-meteo.com/v1/forecast"
    assert kwargs["params"] == {
        "latitude": -23.55,
        "longitude": -46.63,
        "daily": "temperature_2m_max,temperature_2m_min",
        "timezone": "auto",
    }


def test_forecast_cached_for_ten_minutes() -> None:
    clock = _Clock()
    session = MagicMock()
    session.get.return_value = _ok(FORECAST_PAYLOAD)
    client = OpenMeteoClient(ResponseCache(clock=clock), session=session)

    _run_async(client.get_forecast(-23.55, -46.63))
    clock.now = 599.0
    _run_async(client.get_forecast(-23.5500001, -46.6300001))  # same key after rounding
    assert session.get.call_count == 1

    clock.now = 600.0
    _run_async(client.get_forecast(-23.55, -46.63))
    assert session.get.call_count == 2


def test_out_of_range_coordinates_pass_through_and_fail_softly() -> None:
    session = MagicMock()
    session.get.side_effect = [_error(400), _ok(FORECAST_PAYLOAD)]
    cache = ResponseCache()
    client = OpenMeteoClient(cache, session=session)

    assert _run_async(client.get_forecast(123.0, 500.0)) is None
    assert session.get.call_args.kwargs["params"]["latitude"] == 123.0
    assert forecast_cache_key(123.0, 500.0) not in cache

    # Not cached as a negative result.
    assert _run_async(client.get_forecast(123.0, 500.0)) is not None
    assert session.get.call_count == 2


def test_network_failure_returns_none() -> None:
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("dns failure")
    client = OpenMeteoClient(ResponseCache(), session=session)

    assert _run_async(client.get_forecast(1.0, 2.0)) is None


@pytest.mark.parametrize(
    "daily",
    [
        {"time": ["2026-10-19", "2026-10-20"], "temperature_2m_max": [20.0], "temperature_2m_min": [10.0, 11.0]},
        "not-an-object",
        {"time": [], "temperature_2m_max": [], "temperature_2m_min": []},
        None,
    ],
)
def test_malformed_daily_block_returns_none(daily) -> None:
    payload = {k: v for k, v in FORECAST_PAYLOAD.items() if k != "daily"}
    if daily is not None:
        payload["daily"] = daily
    session = MagicMock()
    session.get.return_value = _ok(payload)
    cache = ResponseCache()
    client = OpenMeteoClient(cache, session=session)

    assert _run_async(client.get_forecast(1.0, 2.0)) is None
    assert len(cache) == 0
