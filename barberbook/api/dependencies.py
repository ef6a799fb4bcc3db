# barberbook/api/dependencies.py
"""Injectable collaborators for the HTTP layer: clock, dispatcher, SMS, admin auth"""
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from barberbook.config.settings import settings
from barberbook.scheduling.clock import system_clock
from barberbook.services.notifications.dispatcher import get_dispatcher
from barberbook.services.sms.sms_service import SMSService

__all__ = ["admin_security", "get_clock", "get_dispatcher", "get_sms_service", "require_admin"]

# ============================================================================
# Security Schemes
# ============================================================================

admin_security = HTTPBearer(
    scheme_name="Admin Token",
    description="Enter the ADMIN_API_TOKEN configured for this deployment"
)


def get_clock():
    return system_clock


def get_sms_service() -> SMSService:
    return SMSService()


async def require_admin(
        credentials: HTTPAuthorizationCredentials = Depends(admin_security)
) -> None:
    """Reject admin requests without the configured bearer token"""
    if not secrets.compare_digest(credentials.credentials, settings.ADMIN_API_TOKEN):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
