"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import admin, booking

api_router = APIRouter()

# Bookings, catalogue and availability
api_router.include_router(booking.router, prefix="/booking", tags=["Booking"])

# Admin
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
