from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Any

import httpx

from delivery_fee.exceptions import WeatherFeedError
from delivery_fee.models.weather import WeatherStationReading

ILMATEENISTUS_OBSERVATIONS_URL = (
    "https://www.ilmateenistus.ee/ilma_andmed/xml/observations.php"
)


class IlmateenistusClient:
    def __init__(
        self,
        *,
        user_agent: str,
        timeout_seconds: float,
        base_url: str = ILMATEENISTUS_OBSERVATIONS_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._client = httpx.Client(
            timeout=timeout_seconds,
            headers={
                "User-Agent": user_agent,
                "Accept": "application/xml",
            },
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def fetch_observations(self) -> list[WeatherStationReading]:
        resp = self._client.get(self._base_url)
        resp.raise_for_status()
        return parse_observations(resp.content)


def parse_observations(payload: str | bytes) -> list[WeatherStationReading]:
    """Parse an ``<observations>`` document into one reading per station.

    Stations without a name are skipped; empty or unparsable values become
    ``None``.
    """
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise WeatherFeedError("Malformed weather observations XML") from e
    if root.tag != "observations":
        raise WeatherFeedError(f"Unexpected root element <{root.tag}>")

    readings: list[WeatherStationReading] = []
    for station in root.iter("station"):
        name = _text(station, "name")
        if name is None:
            continue
        readings.append(
            WeatherStationReading(
                name=name,
                wmo_code=_text(station, "wmocode"),
                air_temperature=_float_or_none(_text(station, "airtemperature")),
                wind_speed=_float_or_none(_text(station, "windspeed")),
                phenomenon=_text(station, "phenomenon"),
            )
        )
    return readings


def _text(element: ET.Element, tag: str) -> str | None:
    child = element.find(tag)
    if child is None or child.text is None:
        return None
    value = child.text.strip()
    return value or None


def _float_or_none(v: Any) -> float | None:
    try:
        if v is None:
            return None
        return float(v)
    except (TypeError, ValueError):
        return None
