from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from delivery_fee.api import deps
from delivery_fee.core.config import Settings
from delivery_fee.factory import create_app
from tests.fakes import FakeFeedClient, FakeWeatherRepository


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        env="test",
        debug=True,
        docs_enabled=False,
        log_level="WARNING",
        cors_origins=["http://localhost"],
        trusted_hosts=["testserver", "localhost"],
        influx_url="http://example.com:8086",
        influx_token="test-token-1234567890",
        influx_org="test",
        influx_bucket="test",
        influx_timeout_ms=5000,
        weather_feed_url="http://example.com/observations.php",
        weather_user_agent="test-agent",
        weather_timeout_seconds=1.0,
        weather_measurement="weather_observations",
        weather_fetch_enabled=False,
    )


@pytest.fixture()
def weather_repo() -> FakeWeatherRepository:
    return FakeWeatherRepository()


@pytest.fixture()
def feed_client() -> FakeFeedClient:
    return FakeFeedClient()


@pytest.fixture()
def client(
    settings: Settings,
    weather_repo: FakeWeatherRepository,
    feed_client: FakeFeedClient,
) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[deps.get_weather_repository] = lambda: weather_repo
    app.dependency_overrides[deps.get_feed_client] = lambda: feed_client
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def now() -> datetime:
    return datetime.now(tz=timezone.utc)

