from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from fastapi import Depends, Request

from delivery_fee.clients.ilmateenistus import IlmateenistusClient
from delivery_fee.core.config import Settings
from delivery_fee.repositories.weather import WeatherRepository
from delivery_fee.repositories.weather_influx import InfluxWeatherRepository
from delivery_fee.services.delivery_fee import DeliveryFeeService
from delivery_fee.services.weather import WeatherIngestionService


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_feed_client(request: Request) -> IlmateenistusClient:
    return request.app.state.feed_client


def get_weather_repository(
    request: Request, settings: Annotated[Settings, Depends(get_settings)]
) -> WeatherRepository:
    return InfluxWeatherRepository(
        client=request.app.state.influx_client,
        org=settings.influx_org,
        bucket=settings.influx_bucket,
        measurement=settings.weather_measurement,
        timeout_ms=settings.influx_timeout_ms,
    )


def get_weather_service(
    repo: Annotated[WeatherRepository, Depends(get_weather_repository)],
    feed: Annotated[IlmateenistusClient, Depends(get_feed_client)],
) -> WeatherIngestionService:
    return WeatherIngestionService(repo=repo, feed_client=feed)


def get_delivery_fee_service(
    repo: Annotated[WeatherRepository, Depends(get_weather_repository)],
) -> DeliveryFeeService:
    return DeliveryFeeService(repo)
