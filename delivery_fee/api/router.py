from fastapi import APIRouter

from delivery_fee.api.routes import delivery_fee, weather

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(delivery_fee.router, tags=["delivery-fee"])
api_router.include_router(weather.router, tags=["weather"])
