from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from delivery_fee.exceptions import WeatherDataNotFoundError
from delivery_fee.models.delivery import City, VehicleType
from delivery_fee.models.weather import WeatherObservation
from delivery_fee.repositories.weather import WeatherRepository
from delivery_fee.services.fee_rules import compute_fee


class DeliveryFeeService:
    def __init__(self, repo: WeatherRepository) -> None:
        self._repo = repo

    def calculate_fee(
        self,
        city: City,
        vehicle_type: VehicleType,
        timestamp: datetime | None = None,
    ) -> Decimal:
        observation = self.resolve_observation(city, timestamp)
        return compute_fee(city, vehicle_type, observation)

    def resolve_observation(
        self, city: City, timestamp: datetime | None = None
    ) -> WeatherObservation:
        station_name = city.station_name
        if timestamp is None:
            observation = self._repo.query_latest(station_name=station_name)
        else:
            observation = self._repo.query_as_of(
                station_name=station_name, timestamp=timestamp
            )
        if observation is None:
            raise WeatherDataNotFoundError(station_name, timestamp)
        return observation
