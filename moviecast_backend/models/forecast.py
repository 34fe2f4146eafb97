from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


@dataclass(frozen=True)
class DailyTemperature:
    date: str
    temperature_max: float | None
    temperature_min: float | None


class ForecastResult(BaseModel):
    """
    Open-Meteo daily forecast (`/v1/forecast`).

    The provider returns a `daily` object of parallel arrays; they are lifted to
    top-level fields and must have equal lengths.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    latitude: float
    longitude: float
    utc_offset_seconds: int = 0
    timezone: str | None = None
    dates: list[str] = Field(default_factory=list)
    temperature_max: list[float | None] = Field(default_factory=list)
    temperature_min: list[float | None] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _lift_daily(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "daily" not in data:
            # Already-lifted fields (built in code) are accepted as-is.
            if "dates" in data:
                return data
            raise ValueError("forecast payload has no `daily` object")
        daily = data.get("daily")
        if not isinstance(daily, dict):
            raise ValueError("forecast payload `daily` is not an object")
        if not daily.get("time"):
            raise ValueError("forecast payload `daily.time` is empty")
        lifted = {k: v for k, v in data.items() if k != "daily"}
        lifted["dates"] = daily.get("time") or []
        lifted["temperature_max"] = daily.get("temperature_2m_max") or []
        lifted["temperature_min"] = daily.get("temperature_2m_min") or []
        return lifted

    @model_validator(mode="after")
    def _check_parallel(self) -> "ForecastResult":
        if not (len(self.dates) == len(self.temperature_max) == len(self.temperature_min)):
            raise ValueError("forecast daily arrays have different lengths")
        return self

    def days(self) -> Iterator[DailyTemperature]:
        for day, t_max, t_min in zip(self.dates, self.temperature_max, self.temperature_min):
            yield DailyTemperature(date=day, temperature_max=t_max, temperature_min=t_min)
