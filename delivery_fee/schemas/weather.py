from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class WeatherObservationRead(BaseModel):
    station_name: str = Field(min_length=1, max_length=64)
    wmo_code: str | None = None
    air_temperature: float
    wind_speed: float = Field(ge=0)
    phenomenon: str | None = None
    timestamp: datetime


class WeatherRefreshResponse(BaseModel):
    requested: int = Field(ge=0)
    stored: int = Field(ge=0)
    missing: list[str] = Field(default_factory=list)
    stations: list[str] = Field(default_factory=list)
