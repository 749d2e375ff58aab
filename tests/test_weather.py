from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from delivery_fee.exceptions import WeatherFeedError
from delivery_fee.models.weather import WeatherStationReading
from delivery_fee.services.weather import MONITORED_STATIONS, WeatherIngestionService
from tests.fakes import FakeFeedClient, FakeWeatherRepository, make_observation


def test_refresh_stores_only_monitored_stations(
    weather_repo: FakeWeatherRepository, feed_client: FakeFeedClient
) -> None:
    service = WeatherIngestionService(repo=weather_repo, feed_client=feed_client)

    result = service.refresh()

    assert result.requested == 3
    assert result.stored == 3
    assert result.missing == []
    assert sorted(result.stations) == sorted(MONITORED_STATIONS)
    assert weather_repo.query_latest(station_name="Kuressaare") is None

    tallinn = weather_repo.query_latest(station_name="Tallinn-Harku")
    assert tallinn is not None
    assert tallinn.air_temperature == -5.0
    assert tallinn.wind_speed == 15.0
    assert tallinn.phenomenon == "Light snowfall"
    assert tallinn.wmo_code == "26038"
    assert tallinn.timestamp.tzinfo is not None


def test_refresh_fills_missing_numbers_and_reports_missing_stations(
    weather_repo: FakeWeatherRepository,
) -> None:
    feed = FakeFeedClient(
        [WeatherStationReading(name="Pärnu", air_temperature=None, wind_speed=None, phenomenon=None)]
    )
    service = WeatherIngestionService(repo=weather_repo, feed_client=feed)

    result = service.refresh()

    assert result.stored == 1
    assert sorted(result.missing) == sorted(["Tallinn-Harku", "Tartu-Tõravere"])
    parnu = weather_repo.query_latest(station_name="Pärnu")
    assert parnu is not None
    assert parnu.air_temperature == 0.0
    assert parnu.wind_speed == 0.0
    assert parnu.phenomenon is None


def test_tick_survives_feed_errors(weather_repo: FakeWeatherRepository) -> None:
    feed = FakeFeedClient()
    feed.error = WeatherFeedError("boom")
    service = WeatherIngestionService(repo=weather_repo, feed_client=feed)

    service.tick()

    assert feed.calls == 1
    assert weather_repo.query_latest(station_name="Tallinn-Harku") is None


def test_refresh_endpoint_and_latest(client: TestClient, feed_client: FakeFeedClient) -> None:
    refresh = client.post("/api/v1/weather/refresh")
    assert refresh.status_code == 200, refresh.text
    body = refresh.json()
    assert body["requested"] == 3
    assert body["stored"] == 3
    assert feed_client.calls == 1

    latest = client.get("/api/v1/weather/latest")
    assert latest.status_code == 200, latest.text
    rows = latest.json()
    assert {r["station_name"] for r in rows} == set(MONITORED_STATIONS)
    assert {"air_temperature", "wind_speed", "phenomenon", "timestamp"} <= set(rows[0].keys())


def test_refresh_endpoint_reports_provider_failure(
    client: TestClient, feed_client: FakeFeedClient
) -> None:
    feed_client.error = WeatherFeedError("Malformed weather observations XML")

    resp = client.post("/api/v1/weather/refresh")
    assert resp.status_code == 503
    assert resp.json()["detail"] == "Weather provider unavailable"


def test_list_weather_filters_by_station_and_range(
    client: TestClient, weather_repo: FakeWeatherRepository
) -> None:
    t0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
    for hours in range(3):
        weather_repo.add(make_observation(timestamp=t0 + timedelta(hours=hours)))
    weather_repo.add(make_observation("Pärnu", timestamp=t0))

    resp = client.get(
        "/api/v1/weather",
        params={
            "station": "Tallinn-Harku",
            "start": t0.isoformat(),
            "stop": (t0 + timedelta(hours=1)).isoformat(),
        },
    )
    assert resp.status_code == 200, resp.text
    rows = resp.json()
    assert len(rows) == 2
    assert all(r["station_name"] == "Tallinn-Harku" for r in rows)
    assert rows[0]["timestamp"] > rows[1]["timestamp"]


def test_list_weather_rejects_inverted_range(client: TestClient) -> None:
    resp = client.get(
        "/api/v1/weather",
        params={"start": "2024-03-02T00:00:00Z", "stop": "2024-03-01T00:00:00Z"},
    )
    assert resp.status_code == 400


def test_health(client: TestClient) -> None:
    resp = client.get("/api/v1/weather/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_root(client: TestClient) -> None:
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
