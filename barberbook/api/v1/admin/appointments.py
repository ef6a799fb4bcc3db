# barberbook/api/v1/admin/appointments.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from barberbook.api.dependencies import get_clock, get_dispatcher
from barberbook.config.database import get_db
from barberbook.schemas.appointment import AppointmentResponse, AppointmentStatusUpdate
from barberbook.services.appointment.appointment_query_service import AppointmentQueryService
from barberbook.services.appointment.booking_service import BookingService

router = APIRouter()


# ==================== LIST ====================

@router.get("")
def list_appointments(
        status: Optional[str] = Query(None, pattern="^(confirmed|cancelled|completed)$"),
        date: Optional[str] = Query(None, description="Business-local date YYYY-MM-DD"),
        phone_number: Optional[str] = Query(None, description="Normalized +1XXXXXXXXXX"),
        skip: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=200),
        db: Session = Depends(get_db)
):
    return AppointmentQueryService.list_appointments(
        db, status=status, date_str=date, phone_number=phone_number, skip=skip, limit=limit
    )


# ==================== STATS ====================

@router.get("/stats")
def get_appointment_stats(db: Session = Depends(get_db), clock=Depends(get_clock)):
    return AppointmentQueryService.get_stats(db, clock.now())


# ==================== STATUS ====================

@router.patch("/{appointment_id}/status", response_model=AppointmentResponse)
def update_appointment_status(
        payload: AppointmentStatusUpdate,
        appointment_id: UUID = Path(..., description="Appointment ID"),
        db: Session = Depends(get_db),
        dispatcher=Depends(get_dispatcher)
):
    """Mark completed, or cancel (with the usual cancellation notices)"""
    appointment = BookingService.update_status(db, appointment_id, payload.status, dispatcher)
    return AppointmentResponse.from_appointment(appointment)
