from __future__ import annotations

from datetime import datetime

HIGH_WIND_SPEED = "high wind speed"
DANGEROUS_WEATHER = "dangerous weather conditions"


class DeliveryFeeError(Exception):
    """Base exception for delivery fee calculation."""


class UsageForbiddenError(DeliveryFeeError):
    """Raised when the weather makes the requested vehicle type unsafe."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Usage of selected vehicle type is forbidden due to {reason}")


class WeatherDataNotFoundError(DeliveryFeeError):
    """Raised when no observation exists for a station (at or before a time)."""

    def __init__(self, station_name: str, timestamp: datetime | None = None) -> None:
        self.station_name = station_name
        self.timestamp = timestamp
        message = f"No weather data available for station: {station_name}"
        if timestamp is not None:
            message += f" at or before {timestamp.isoformat()}"
        super().__init__(message)


class InvalidInputError(DeliveryFeeError):
    """Raised when a city or vehicle type is not a known value."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"Unknown value: {value!r}")


class WeatherFeedError(DeliveryFeeError):
    """Raised when the weather feed cannot be read or parsed."""
