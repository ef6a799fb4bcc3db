# barberbook/core/exceptions.py
"""Scheduling error taxonomy and the FastAPI handlers that render it"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SchedulingError(Exception):
    """Base class for per-request booking errors"""

    status_code = 400

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error": self.message}
        if self.reason:
            data["reason"] = self.reason
        return data


class ValidationError(SchedulingError):
    """Malformed date/time input or a request the rules never allow"""

    status_code = 400


class UnavailableError(SchedulingError):
    """Date closed, nothing configured, or the time is outside open hours"""

    status_code = 400

    def __init__(self, message: str, reason: str):
        super().__init__(message, reason=reason)


class ConflictError(SchedulingError):
    """Requested interval collides with a confirmed appointment"""

    status_code = 409


class ExistingAppointmentConflict(ConflictError):
    """The phone number already holds an upcoming confirmed appointment"""

    def __init__(self, appointment):
        super().__init__(
            "You already have an upcoming appointment",
            reason="existing_appointment",
        )
        self.appointment = appointment

    def to_dict(self) -> Dict[str, Any]:
        from barberbook.scheduling.timezones import business_date_key, format_instant_wall_clock

        start = self.appointment.start_time
        data = super().to_dict()
        data["existing_appointment"] = {
            "id": str(self.appointment.id),
            "date": business_date_key(start),
            "time": format_instant_wall_clock(start),
            "start_time": start.isoformat(),
        }
        return data


class NotFoundError(SchedulingError):
    status_code = 404


class AppointmentNotFoundError(NotFoundError):
    def __init__(self, appointment_id):
        super().__init__("Appointment not found")
        self.appointment_id = appointment_id


class DependencyError(Exception):
    """SMS or calendar provider failure; never fails a booking"""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


async def scheduling_error_handler(request: Request, exc: SchedulingError):
    logger.info(
        f"{request.method} {request.url.path} rejected with {exc.__class__.__name__}: {exc.message}",
        extra={"reason": exc.reason},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def dependency_error_handler(request: Request, exc: DependencyError):
    """Only admin-triggered provider calls surface here; bookings never do"""
    logger.error(f"{request.method} {request.url.path} failed in {exc.service}: {exc.message}")
    return JSONResponse(status_code=502, content={"error": exc.message, "service": exc.service})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid input data",
            "details": jsonable_encoder(exc.errors()),
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SchedulingError, scheduling_error_handler)
    app.add_exception_handler(DependencyError, dependency_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
