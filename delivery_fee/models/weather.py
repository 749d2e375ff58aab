from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class WeatherObservation:
    station_name: str
    air_temperature: float
    wind_speed: float
    timestamp: datetime

    phenomenon: str | None = None
    wmo_code: str | None = None


@dataclass(frozen=True)
class WeatherStationReading:
    """One ``<station>`` entry of the observations feed, values as published."""

    name: str
    wmo_code: str | None = None
    air_temperature: float | None = None
    wind_speed: float | None = None
    phenomenon: str | None = None
