from __future__ import annotations

import logging
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from delivery_fee.api.deps import get_weather_repository, get_weather_service, to_utc
from delivery_fee.repositories.weather import WeatherRepository
from delivery_fee.schemas.weather import WeatherObservationRead, WeatherRefreshResponse
from delivery_fee.services.weather import WeatherIngestionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/weather")


@router.get("", response_model=list[WeatherObservationRead])
def list_weather(
    service: Annotated[WeatherIngestionService, Depends(get_weather_service)],
    station: Annotated[list[str] | None, Query()] = None,
    start: Annotated[datetime | None, Query()] = None,
    stop: Annotated[datetime | None, Query()] = None,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> list[WeatherObservationRead]:
    start_dt = to_utc(start) if start else None
    stop_dt = to_utc(stop) if stop else None
    if start_dt and stop_dt and start_dt > stop_dt:
        raise HTTPException(status_code=400, detail="'start' must be <= 'stop'")
    try:
        rows = service.list_observations(
            station_names=station, start=start_dt, stop=stop_dt, limit=limit
        )
    except Exception as e:  # noqa: BLE001 - normalize storage failures
        logger.exception("Listing weather observations failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="InfluxDB unavailable",
        ) from e
    return [WeatherObservationRead.model_validate(r.__dict__) for r in rows]


@router.post("/refresh", response_model=WeatherRefreshResponse)
def refresh_weather(
    service: Annotated[WeatherIngestionService, Depends(get_weather_service)],
) -> WeatherRefreshResponse:
    try:
        result = service.refresh()
    except Exception as e:  # noqa: BLE001
        logger.exception("Manual weather refresh failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Weather provider unavailable",
        ) from e
    return WeatherRefreshResponse(
        requested=result.requested,
        stored=result.stored,
        missing=result.missing,
        stations=result.stations,
    )


@router.get("/latest", response_model=list[WeatherObservationRead])
def latest_weather(
    service: Annotated[WeatherIngestionService, Depends(get_weather_service)],
) -> list[WeatherObservationRead]:
    try:
        rows = service.latest()
    except Exception as e:  # noqa: BLE001
        logger.exception("Latest weather lookup failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="InfluxDB unavailable",
        ) from e
    return [WeatherObservationRead.model_validate(r.__dict__) for r in rows]


@router.get("/health", tags=["meta"])
def health(
    repo: Annotated[WeatherRepository, Depends(get_weather_repository)],
) -> dict[str, str]:
    try:
        repo.ping()
    except Exception as e:  # noqa: BLE001 - expose as 503 without leaking internals
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="InfluxDB unavailable",
        ) from e
    return {"status": "ok"}
