from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from influxdb_client import InfluxDBClient, Point, WritePrecision
from influxdb_client.client.write_api import SYNCHRONOUS

from delivery_fee.models.weather import WeatherObservation
from delivery_fee.repositories.flux import flux_any_equal, flux_str, flux_time

STATION_TAG = "station"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Flux range() excludes its stop bound; points are written from Python
# datetimes, so one microsecond past the timestamp makes it inclusive.
_INCLUSIVE_STOP = timedelta(microseconds=1)


class InfluxWeatherRepository:
    def __init__(
        self,
        *,
        client: InfluxDBClient,
        org: str,
        bucket: str,
        measurement: str,
        timeout_ms: int,
    ) -> None:
        self._client = client
        self._org = org
        self._bucket = bucket
        self._measurement = measurement
        self._timeout_ms = timeout_ms

    def ping(self) -> None:
        self._client.ping()

    def write_observations(self, observations: list[WeatherObservation]) -> None:
        if not observations:
            return
        points = [self._to_point(o) for o in observations]
        write_api = self._client.write_api(write_options=SYNCHRONOUS)
        write_api.write(bucket=self._bucket, org=self._org, record=points)

    def query_latest(self, *, station_name: str) -> WeatherObservation | None:
        rows = self._query(
            station_names=[station_name],
            start=EPOCH,
            stop=None,
            limit=1,
        )
        return rows[0] if rows else None

    def query_as_of(
        self, *, station_name: str, timestamp: datetime
    ) -> WeatherObservation | None:
        rows = self._query(
            station_names=[station_name],
            start=EPOCH,
            stop=_as_utc(timestamp) + _INCLUSIVE_STOP,
            limit=1,
        )
        return rows[0] if rows else None

    def query_observations(
        self,
        *,
        station_names: list[str],
        start: datetime,
        stop: datetime,
        limit: int,
    ) -> list[WeatherObservation]:
        if not station_names:
            return []
        return self._query(
            station_names=station_names,
            start=start,
            stop=stop + _INCLUSIVE_STOP,
            limit=limit,
        )

    def build_query(
        self,
        *,
        station_names: list[str],
        start: datetime,
        stop: datetime | None,
        limit: int,
    ) -> str:
        range_args = f"start: {flux_time(start)}"
        if stop is not None:
            range_args += f", stop: {flux_time(stop)}"
        station_predicate = flux_any_equal(STATION_TAG, station_names)

        return f"""
from(bucket: {flux_str(self._bucket)})
  |> range({range_args})
  |> filter(fn: (r) => r["_measurement"] == {flux_str(self._measurement)})
  |> filter(fn: (r) => {station_predicate})
  |> pivot(rowKey: ["_time"], columnKey: ["_field"], valueColumn: "_value")
  |> group()
  |> sort(columns: ["_time"], desc: true)
  |> limit(n: {int(limit)})
"""

    def _query(
        self,
        *,
        station_names: list[str],
        start: datetime,
        stop: datetime | None,
        limit: int,
    ) -> list[WeatherObservation]:
        query = self.build_query(
            station_names=station_names, start=start, stop=stop, limit=limit
        )
        query_api = self._client.query_api()
        tables = query_api.query(query=query, org=self._org)

        results: list[WeatherObservation] = []
        for table in tables:
            for record in table.records:
                values: dict[str, Any] = record.values
                station = values.get(STATION_TAG)
                ts = record.get_time()
                if not isinstance(station, str) or ts is None:
                    continue
                results.append(
                    WeatherObservation(
                        station_name=station,
                        air_temperature=_float_or_default(values.get("air_temperature"), 0.0),
                        wind_speed=_float_or_default(values.get("wind_speed"), 0.0),
                        timestamp=ts,
                        phenomenon=_str_or_none(values.get("phenomenon")),
                        wmo_code=_str_or_none(values.get("wmo_code")),
                    )
                )
        results.sort(key=lambda o: o.timestamp, reverse=True)
        return results

    def _to_point(self, observation: WeatherObservation) -> Point:
        point = (
            Point(self._measurement)
            .tag(STATION_TAG, observation.station_name)
            .field("air_temperature", float(observation.air_temperature))
            .field("wind_speed", float(observation.wind_speed))
        )
        if observation.phenomenon is not None:
            point = point.field("phenomenon", observation.phenomenon)
        if observation.wmo_code is not None:
            point = point.field("wmo_code", observation.wmo_code)
        return point.time(_as_utc(observation.timestamp), WritePrecision.NS)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _float_or_default(v: Any, default: float) -> float:
    try:
        if v is None:
            return default
        return float(v)
    except (TypeError, ValueError):
        return default


def _str_or_none(v: Any) -> str | None:
    if v is None:
        return None
    if isinstance(v, str):
        return v
    return str(v)
