from __future__ import annotations

import logging
import threading
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from influxdb_client import InfluxDBClient
from starlette.middleware.trustedhost import TrustedHostMiddleware

from delivery_fee.api.router import api_router
from delivery_fee.clients.ilmateenistus import IlmateenistusClient
from delivery_fee.core.config import Settings, load_settings
from delivery_fee.core.logging import configure_logging
from delivery_fee.repositories.weather_influx import InfluxWeatherRepository
from delivery_fee.services.weather import WeatherIngestionService

logger = logging.getLogger(__name__)


def create_influx_client(settings: Settings) -> InfluxDBClient:
    return InfluxDBClient(
        url=str(settings.influx_url),
        token=settings.influx_token,
        org=settings.influx_org,
        timeout=settings.influx_timeout_ms,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        stop_event: threading.Event | None = None
        fetch_thread: threading.Thread | None = None

        app.state.settings = settings
        app.state.influx_client = create_influx_client(settings)
        app.state.feed_client = IlmateenistusClient(
            user_agent=settings.weather_user_agent,
            timeout_seconds=settings.weather_timeout_seconds,
            base_url=str(settings.weather_feed_url),
        )

        if settings.weather_fetch_enabled:
            stop_event = threading.Event()
            repo = InfluxWeatherRepository(
                client=app.state.influx_client,
                org=settings.influx_org,
                bucket=settings.influx_bucket,
                measurement=settings.weather_measurement,
                timeout_ms=settings.influx_timeout_ms,
            )
            ingestion = WeatherIngestionService(
                repo=repo, feed_client=app.state.feed_client
            )

            def _loop() -> None:
                while stop_event is not None and not stop_event.is_set():
                    ingestion.tick()
                    stop_event.wait(settings.weather_fetch_interval_seconds)

            fetch_thread = threading.Thread(
                target=_loop, name="weather-fetch", daemon=True
            )
            fetch_thread.start()
            logger.info(
                "Scheduled weather fetch started",
                extra={"interval_seconds": settings.weather_fetch_interval_seconds},
            )

        yield
        if stop_event is not None:
            stop_event.set()
        if fetch_thread is not None and fetch_thread.is_alive():
            fetch_thread.join(timeout=2.0)
        app.state.feed_client.close()
        app.state.influx_client.close()

    docs_enabled = settings.docs_enabled and not settings.is_production
    app = FastAPI(
        title="Delivery Fee Calculator API",
        description=(
            "Calculates delivery fees from city, vehicle type and current or "
            "historical weather conditions."
        ),
        version="0.1.0",
        debug=settings.debug,
        docs_url="/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(GZipMiddleware, minimum_size=1024)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    if settings.trusted_hosts:
        app.add_middleware(TrustedHostMiddleware, allowed_hosts=settings.trusted_hosts)

    @app.middleware("http")
    async def security_headers(request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "no-referrer")
        if settings.is_production:
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response

    @app.get("/", tags=["meta"])
    def root():
        return {"name": "delivery-fee-calculator", "status": "ok"}

    app.include_router(api_router)
    return app
