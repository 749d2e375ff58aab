from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from delivery_fee.clients.ilmateenistus import IlmateenistusClient
from delivery_fee.models.delivery import STATION_NAMES
from delivery_fee.models.weather import WeatherObservation, WeatherStationReading
from delivery_fee.repositories.weather import WeatherRepository

logger = logging.getLogger(__name__)

MONITORED_STATIONS: list[str] = list(STATION_NAMES.values())
DEFAULT_NUMERIC_VALUE = 0.0


@dataclass(frozen=True)
class WeatherRefreshResult:
    requested: int
    stored: int
    missing: list[str]
    stations: list[str]


class WeatherIngestionService:
    def __init__(
        self,
        *,
        repo: WeatherRepository,
        feed_client: IlmateenistusClient,
        stations: list[str] | None = None,
    ) -> None:
        self._repo = repo
        self._feed = feed_client
        self._stations = stations or MONITORED_STATIONS

    def refresh(self) -> WeatherRefreshResult:
        """Fetch the feed once and store one observation per monitored station.

        Feed and storage errors propagate to the caller.
        """
        now = datetime.now(tz=timezone.utc)
        logger.info("Fetching weather observations", extra={"stations": self._stations})
        readings = self._feed.fetch_observations()

        by_name = {r.name: r for r in readings if r.name in self._stations}
        observations = [
            _to_observation(by_name[name], timestamp=now)
            for name in self._stations
            if name in by_name
        ]
        missing = [name for name in self._stations if name not in by_name]
        if missing:
            logger.warning("Monitored stations missing from feed", extra={"missing": missing})

        self._repo.write_observations(observations)
        logger.info("Stored weather observations", extra={"stored": len(observations)})
        return WeatherRefreshResult(
            requested=len(self._stations),
            stored=len(observations),
            missing=missing,
            stations=[o.station_name for o in observations],
        )

    def tick(self) -> None:
        try:
            self.refresh()
        except Exception:  # noqa: BLE001 - scheduler must survive a bad run
            logger.exception("Scheduled weather fetch failed")

    def latest(self) -> list[WeatherObservation]:
        rows: list[WeatherObservation] = []
        for name in self._stations:
            observation = self._repo.query_latest(station_name=name)
            if observation is not None:
                rows.append(observation)
        return rows

    def list_observations(
        self,
        *,
        station_names: list[str] | None = None,
        start: datetime | None = None,
        stop: datetime | None = None,
        limit: int = 100,
    ) -> list[WeatherObservation]:
        stop_dt = stop or datetime.now(tz=timezone.utc)
        start_dt = start or stop_dt - timedelta(days=1)
        return self._repo.query_observations(
            station_names=station_names or self._stations,
            start=start_dt,
            stop=stop_dt,
            limit=limit,
        )


def _to_observation(reading: WeatherStationReading, *, timestamp: datetime) -> WeatherObservation:
    return WeatherObservation(
        station_name=reading.name,
        air_temperature=(
            reading.air_temperature
            if reading.air_temperature is not None
            else DEFAULT_NUMERIC_VALUE
        ),
        wind_speed=(
            reading.wind_speed if reading.wind_speed is not None else DEFAULT_NUMERIC_VALUE
        ),
        timestamp=timestamp,
        phenomenon=reading.phenomenon,
        wmo_code=reading.wmo_code,
    )
