"""
API v1 router setup
Organized into: public booking routes and admin (bearer token) routes
"""
from fastapi import APIRouter, Depends

from barberbook.api.dependencies import require_admin
from barberbook.api.v1.public import appointments, availability
from barberbook.api.v1.admin import (
    appointments as admin_appointments,
    available_slots,
    blocked_dates,
    notifications,
    working_hours,
)

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    tags=["Public"]
)

api_v1_router.include_router(
    appointments.router,
    prefix="/appointments",
    tags=["Public"]
)

# ============================================================================
# ADMIN ROUTES (ADMIN_API_TOKEN bearer required)
# ============================================================================
admin_router = APIRouter(dependencies=[Depends(require_admin)])

admin_router.include_router(available_slots.router, prefix="/available-slots")
admin_router.include_router(blocked_dates.router, prefix="/blocked-dates")
admin_router.include_router(working_hours.router, prefix="/working-hours")
admin_router.include_router(admin_appointments.router, prefix="/appointments")
admin_router.include_router(notifications.router)

api_v1_router.include_router(
    admin_router,
    prefix="/admin",
    tags=["Admin"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "admin": "Bearer ADMIN_API_TOKEN required"
        }
    }
