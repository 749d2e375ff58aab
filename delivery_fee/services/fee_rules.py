"""Regional base fees and weather surcharges.

All amounts are EUR as ``Decimal`` with two fraction digits. Every function
here is pure: no I/O, no logging, no shared state.
"""

from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType

from delivery_fee.exceptions import DANGEROUS_WEATHER, HIGH_WIND_SPEED, UsageForbiddenError
from delivery_fee.models.delivery import City, VehicleType
from delivery_fee.models.phenomenon import PhenomenonCategory, classify
from delivery_fee.models.weather import WeatherObservation

CENT = Decimal("0.01")
ZERO_FEE = Decimal("0.00")

COLD_TEMP_THRESHOLD = -10.0
COOL_TEMP_THRESHOLD = 0.0
HIGH_WIND_THRESHOLD = 20.0
MODERATE_WIND_THRESHOLD = 10.0

COLD_TEMP_FEE = Decimal("1.00")
COOL_TEMP_FEE = Decimal("0.50")
WIND_FEE = Decimal("0.50")
SNOW_SLEET_FEE = Decimal("1.00")
RAIN_FEE = Decimal("0.50")

BASE_FEES = MappingProxyType(
    {
        City.TALLINN: MappingProxyType(
            {
                VehicleType.CAR: Decimal("4.00"),
                VehicleType.SCOOTER: Decimal("3.50"),
                VehicleType.BIKE: Decimal("3.00"),
            }
        ),
        City.TARTU: MappingProxyType(
            {
                VehicleType.CAR: Decimal("3.50"),
                VehicleType.SCOOTER: Decimal("3.00"),
                VehicleType.BIKE: Decimal("2.50"),
            }
        ),
        City.PARNU: MappingProxyType(
            {
                VehicleType.CAR: Decimal("3.00"),
                VehicleType.SCOOTER: Decimal("2.50"),
                VehicleType.BIKE: Decimal("2.00"),
            }
        ),
    }
)

_TEMPERATURE_VEHICLES = frozenset({VehicleType.SCOOTER, VehicleType.BIKE})
_PHENOMENON_VEHICLES = frozenset({VehicleType.SCOOTER, VehicleType.BIKE})


def regional_base_fee(city: City, vehicle_type: VehicleType) -> Decimal:
    return BASE_FEES[city][vehicle_type]


def temperature_fee(vehicle_type: VehicleType, air_temperature: float) -> Decimal:
    if vehicle_type not in _TEMPERATURE_VEHICLES:
        return ZERO_FEE
    if air_temperature < COLD_TEMP_THRESHOLD:
        return COLD_TEMP_FEE
    if air_temperature <= COOL_TEMP_THRESHOLD:
        return COOL_TEMP_FEE
    return ZERO_FEE


def wind_fee(vehicle_type: VehicleType, wind_speed: float) -> Decimal:
    if vehicle_type is not VehicleType.BIKE:
        return ZERO_FEE
    if wind_speed > HIGH_WIND_THRESHOLD:
        raise UsageForbiddenError(HIGH_WIND_SPEED)
    if wind_speed >= MODERATE_WIND_THRESHOLD:
        return WIND_FEE
    return ZERO_FEE


def phenomenon_fee(vehicle_type: VehicleType, phenomenon: str | None) -> Decimal:
    if vehicle_type not in _PHENOMENON_VEHICLES:
        return ZERO_FEE

    category = classify(phenomenon)
    if category.is_usage_forbidden:
        raise UsageForbiddenError(DANGEROUS_WEATHER)
    if category in (PhenomenonCategory.SNOW, PhenomenonCategory.SLEET):
        return SNOW_SLEET_FEE
    if category is PhenomenonCategory.RAIN:
        return RAIN_FEE
    return ZERO_FEE


def compute_fee(
    city: City, vehicle_type: VehicleType, observation: WeatherObservation
) -> Decimal:
    """Total delivery fee for ``vehicle_type`` in ``city`` under ``observation``.

    Raises ``UsageForbiddenError`` when the weather forbids the vehicle. The
    wind check always runs before the phenomenon check, so high wind is the
    reported reason when both would forbid a bike.
    """
    components = [
        regional_base_fee(city, vehicle_type),
        temperature_fee(vehicle_type, observation.air_temperature),
        wind_fee(vehicle_type, observation.wind_speed),
        phenomenon_fee(vehicle_type, observation.phenomenon),
    ]
    total = sum((c.quantize(CENT) for c in components), ZERO_FEE)
    return total.quantize(CENT)
