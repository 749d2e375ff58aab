from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from delivery_fee.api.deps import get_delivery_fee_service, to_utc
from delivery_fee.exceptions import (
    InvalidInputError,
    UsageForbiddenError,
    WeatherDataNotFoundError,
)
from delivery_fee.models.delivery import City, VehicleType
from delivery_fee.schemas.delivery_fee import DeliveryFeeResponse
from delivery_fee.services.delivery_fee import DeliveryFeeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/delivery-fee")

INVALID_INPUT_DETAIL = "Invalid city or vehicle type provided"


def _parse(city: str, vehicle_type: str) -> tuple[City, VehicleType]:
    try:
        return City.parse(city), VehicleType.parse(vehicle_type)
    except InvalidInputError as e:
        logger.warning("Invalid input: %s", e)
        raise HTTPException(status_code=400, detail=INVALID_INPUT_DETAIL) from e


def _calculate(
    service: DeliveryFeeService,
    city: City,
    vehicle_type: VehicleType,
    at: datetime | None,
) -> Decimal:
    try:
        return service.calculate_fee(city, vehicle_type, at)
    except UsageForbiddenError as e:
        logger.warning(
            "Delivery calculation restriction: %s",
            e,
            extra={"city": city.value, "vehicle_type": vehicle_type.value},
        )
        raise HTTPException(status_code=400, detail=str(e)) from e
    except WeatherDataNotFoundError as e:
        logger.warning("Weather data not found: %s", e)
        raise HTTPException(status_code=404, detail=str(e)) from e
    except Exception as e:  # noqa: BLE001 - normalize storage failures
        logger.exception("Delivery fee calculation failed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="InfluxDB unavailable",
        ) from e


@router.get("/{city}/{vehicle_type}", response_model=DeliveryFeeResponse)
def calculate_delivery_fee(
    city: str,
    vehicle_type: str,
    service: Annotated[DeliveryFeeService, Depends(get_delivery_fee_service)],
) -> DeliveryFeeResponse:
    city_enum, vehicle_enum = _parse(city, vehicle_type)
    fee = _calculate(service, city_enum, vehicle_enum, None)
    return DeliveryFeeResponse(city=city_enum, vehicle_type=vehicle_enum, fee=fee)


@router.get("/{city}/{vehicle_type}/at", response_model=DeliveryFeeResponse)
def calculate_delivery_fee_at(
    city: str,
    vehicle_type: str,
    at: Annotated[datetime, Query(alias="datetime")],
    service: Annotated[DeliveryFeeService, Depends(get_delivery_fee_service)],
) -> DeliveryFeeResponse:
    city_enum, vehicle_enum = _parse(city, vehicle_type)
    at_utc = to_utc(at)
    fee = _calculate(service, city_enum, vehicle_enum, at_utc)
    return DeliveryFeeResponse(
        city=city_enum, vehicle_type=vehicle_enum, fee=fee, at=at_utc
    )
