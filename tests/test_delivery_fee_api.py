from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from fastapi.testclient import TestClient

from delivery_fee.api import deps
from tests.fakes import FakeWeatherRepository, FailingWeatherRepository, make_observation

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_fee_for_current_weather(client: TestClient, weather_repo: FakeWeatherRepository) -> None:
    weather_repo.add(
        make_observation(air_temperature=-5.0, wind_speed=15.0, phenomenon="Light snowfall", timestamp=T0)
    )

    resp = client.get("/api/v1/delivery-fee/TALLINN/BIKE")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["city"] == "TALLINN"
    assert body["vehicle_type"] == "BIKE"
    assert Decimal(str(body["fee"])) == Decimal("5.00")
    assert body["at"] is None


def test_city_and_vehicle_are_case_insensitive(
    client: TestClient, weather_repo: FakeWeatherRepository
) -> None:
    weather_repo.add(make_observation("Pärnu", timestamp=T0))

    resp = client.get("/api/v1/delivery-fee/parnu/Car")
    assert resp.status_code == 200, resp.text
    assert Decimal(str(resp.json()["fee"])) == Decimal("3.00")


def test_unknown_city_is_bad_request(client: TestClient) -> None:
    resp = client.get("/api/v1/delivery-fee/NARVA/CAR")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid city or vehicle type provided"


def test_unknown_vehicle_is_bad_request(client: TestClient) -> None:
    resp = client.get("/api/v1/delivery-fee/TALLINN/TRUCK")
    assert resp.status_code == 400
    assert "Invalid" in resp.json()["detail"]


def test_forbidden_usage_is_bad_request(client: TestClient, weather_repo: FakeWeatherRepository) -> None:
    weather_repo.add(make_observation(wind_speed=25.0, timestamp=T0))

    resp = client.get("/api/v1/delivery-fee/TALLINN/BIKE")
    assert resp.status_code == 400
    assert resp.json()["detail"] == (
        "Usage of selected vehicle type is forbidden due to high wind speed"
    )


def test_missing_weather_data_is_not_found(client: TestClient) -> None:
    resp = client.get("/api/v1/delivery-fee/TARTU/SCOOTER")
    assert resp.status_code == 404
    assert "Tartu-Tõravere" in resp.json()["detail"]


def test_historical_fee_uses_as_of_observation(
    client: TestClient, weather_repo: FakeWeatherRepository
) -> None:
    weather_repo.add(
        make_observation(air_temperature=-12.0, wind_speed=3.0, phenomenon="Moderate rain", timestamp=T0 - timedelta(hours=2))
    )
    weather_repo.add(make_observation(air_temperature=15.0, wind_speed=3.0, timestamp=T0 + timedelta(minutes=5)))

    resp = client.get(
        "/api/v1/delivery-fee/TALLINN/SCOOTER/at",
        params={"datetime": "2024-03-01T12:00:00"},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert Decimal(str(body["fee"])) == Decimal("5.00")
    assert datetime.fromisoformat(body["at"].replace("Z", "+00:00")) == T0

    current = client.get("/api/v1/delivery-fee/TALLINN/SCOOTER")
    assert Decimal(str(current.json()["fee"])) == Decimal("3.50")


def test_historical_fee_before_all_data_is_not_found(
    client: TestClient, weather_repo: FakeWeatherRepository
) -> None:
    weather_repo.add(make_observation(timestamp=T0))

    resp = client.get(
        "/api/v1/delivery-fee/TALLINN/CAR/at",
        params={"datetime": "2023-01-01T00:00:00Z"},
    )
    assert resp.status_code == 404
    assert "Tallinn-Harku" in resp.json()["detail"]


def test_historical_fee_requires_valid_datetime(client: TestClient) -> None:
    resp = client.get("/api/v1/delivery-fee/TALLINN/CAR/at", params={"datetime": "yesterday"})
    assert resp.status_code == 422


def test_storage_failure_is_service_unavailable(client: TestClient) -> None:
    failing = FailingWeatherRepository()
    client.app.dependency_overrides[deps.get_weather_repository] = lambda: failing

    resp = client.get("/api/v1/delivery-fee/TALLINN/CAR")
    assert resp.status_code == 503
