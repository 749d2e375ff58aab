from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from delivery_fee.models.delivery import City, VehicleType


class DeliveryFeeResponse(BaseModel):
    city: City
    vehicle_type: VehicleType
    fee: Decimal = Field(ge=0, decimal_places=2)
    at: datetime | None = None
