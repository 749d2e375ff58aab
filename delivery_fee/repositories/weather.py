from __future__ import annotations

from datetime import datetime
from typing import Protocol

from delivery_fee.models.weather import WeatherObservation


class WeatherRepository(Protocol):
    def ping(self) -> None: ...

    def write_observations(self, observations: list[WeatherObservation]) -> None: ...

    def query_latest(self, *, station_name: str) -> WeatherObservation | None: ...

    def query_as_of(
        self, *, station_name: str, timestamp: datetime
    ) -> WeatherObservation | None: ...

    def query_observations(
        self,
        *,
        station_names: list[str],
        start: datetime,
        stop: datetime,
        limit: int,
    ) -> list[WeatherObservation]: ...
