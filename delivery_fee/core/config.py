from __future__ import annotations

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from delivery_fee.clients.ilmateenistus import ILMATEENISTUS_OBSERVATIONS_URL

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="APP_",
        case_sensitive=False,
    )

    env: str = Field(default="development")
    debug: bool = Field(default=False)
    docs_enabled: bool = Field(default=True)
    log_level: str = Field(default="INFO")

    cors_origins: list[str] = Field(default_factory=list)
    trusted_hosts: list[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])

    influx_url: AnyHttpUrl = Field(default="http://influxdb:8086")
    influx_token: str = Field(min_length=10)
    influx_org: str = Field(min_length=1)
    influx_bucket: str = Field(min_length=1)
    influx_timeout_ms: int = Field(default=10_000, ge=1000, le=120_000)

    weather_feed_url: AnyHttpUrl = Field(default=ILMATEENISTUS_OBSERVATIONS_URL)
    weather_user_agent: str = Field(
        default="delivery-fee-calculator/0.1 (contact: you@example.com)",
        min_length=3,
        max_length=256,
    )
    weather_timeout_seconds: float = Field(default=10.0, ge=1.0, le=30.0)
    weather_measurement: str = Field(default="weather_observations", min_length=1, max_length=64)
    weather_fetch_enabled: bool = Field(default=True)
    weather_fetch_interval_seconds: float = Field(default=3600.0, ge=1.0, le=24 * 3600.0)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


def load_settings() -> Settings:
    settings = Settings()
    if not settings.cors_origins:
        settings.cors_origins = ["http://localhost:3000", "http://localhost:8000"]
    return settings
