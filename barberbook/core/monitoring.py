# barberbook/core/monitoring.py
"""Health checks: liveness plus database, broker and scheduling config"""
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from barberbook.config.database import get_db
from barberbook.config.redis import get_redis
from barberbook.config.settings import settings
from barberbook.scheduling.timezones import business_tz
from barberbook.scheduling.windows import SOURCES

logger = logging.getLogger(__name__)

health_router = APIRouter()


def scheduling_config_check() -> str:
    """Misconfiguration here breaks every availability request"""
    try:
        business_tz()
    except ValueError as e:
        return f"unhealthy: {e}"
    if settings.AVAILABILITY_SOURCE not in SOURCES:
        return f"unhealthy: unknown availability source {settings.AVAILABILITY_SOURCE!r}"
    if settings.SLOT_INTERVAL <= 0 or settings.APPOINTMENT_DURATION <= 0:
        return "unhealthy: slot interval and appointment duration must be positive"
    return "healthy"


@health_router.get("/")
async def health_check():
    return {"status": "healthy", "service": "barberbook-api"}


@health_router.get("/detailed")
async def detailed_health_check(db: Session = Depends(get_db)):
    """Database, Redis (Celery broker) and scheduling settings"""
    checks = {
        "database": "unknown",
        "redis": "unknown",
        "scheduling": scheduling_config_check(),
    }

    try:
        db.execute(text("SELECT 1"))
        checks["database"] = "healthy"
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        checks["database"] = f"unhealthy: {e}"

    # Notifications queue here; bookings still work without it
    try:
        redis_client = await get_redis()
        await redis_client.ping()
        await redis_client.aclose()
        checks["redis"] = "healthy"
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        checks["redis"] = f"unhealthy: {e}"

    if checks["database"] != "healthy" or checks["scheduling"] != "healthy":
        overall = "unhealthy"
    elif checks["redis"] != "healthy":
        overall = "degraded"
    else:
        overall = "healthy"

    return {
        "overall": overall,
        "checks": checks,
        "timezone": settings.BUSINESS_TIMEZONE,
        "availability_source": settings.AVAILABILITY_SOURCE,
    }
