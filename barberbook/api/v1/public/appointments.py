# barberbook/api/v1/public/appointments.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from barberbook.api.dependencies import get_clock, get_dispatcher
from barberbook.config.database import get_db
from barberbook.core.exceptions import ValidationError
from barberbook.schemas.appointment import (
    AppointmentCreate,
    AppointmentReschedule,
    AppointmentResponse,
)
from barberbook.services.appointment.appointment_query_service import AppointmentQueryService
from barberbook.services.appointment.booking_service import BookingService
from barberbook.utils.phone import normalize_phone_number

router = APIRouter()


@router.get("", response_model=List[AppointmentResponse])
def find_my_appointments(
        phone: str = Query(..., description="Phone number used when booking"),
        db: Session = Depends(get_db),
        clock=Depends(get_clock)
):
    """Upcoming confirmed appointments for a phone number, so clients can manage them"""
    try:
        phone_number = normalize_phone_number(phone)
    except ValueError as e:
        raise ValidationError(str(e))

    appointments = AppointmentQueryService.upcoming_for_phone(db, phone_number, clock.now())
    return [AppointmentResponse.from_appointment(appointment) for appointment in appointments]


@router.post("", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
        payload: AppointmentCreate,
        db: Session = Depends(get_db),
        clock=Depends(get_clock),
        dispatcher=Depends(get_dispatcher)
):
    """Book an appointment"""
    appointment = BookingService.create_appointment(
        db,
        client_name=payload.client_name,
        phone_number=payload.phone_number,
        date_str=payload.date,
        time_str=payload.time,
        now=clock.now(),
        dispatcher=dispatcher
    )
    return AppointmentResponse.from_appointment(appointment)


@router.get("/{appointment_id}", response_model=AppointmentResponse)
def get_appointment(
        appointment_id: UUID = Path(..., description="Appointment ID"),
        db: Session = Depends(get_db)
):
    return AppointmentResponse.from_appointment(BookingService.get_appointment(db, appointment_id))


@router.patch("/{appointment_id}", response_model=AppointmentResponse)
def reschedule_appointment(
        payload: AppointmentReschedule,
        appointment_id: UUID = Path(..., description="Appointment ID"),
        db: Session = Depends(get_db),
        clock=Depends(get_clock),
        dispatcher=Depends(get_dispatcher)
):
    """Move an appointment to a new date and time"""
    appointment = BookingService.reschedule_appointment(
        db,
        appointment_id,
        date_str=payload.date,
        time_str=payload.time,
        now=clock.now(),
        dispatcher=dispatcher
    )
    return AppointmentResponse.from_appointment(appointment)


@router.delete("/{appointment_id}", response_model=AppointmentResponse)
def cancel_appointment(
        appointment_id: UUID = Path(..., description="Appointment ID"),
        db: Session = Depends(get_db),
        dispatcher=Depends(get_dispatcher)
):
    """Cancel an appointment; repeating the call changes nothing"""
    appointment = BookingService.cancel_appointment(db, appointment_id, dispatcher)
    return AppointmentResponse.from_appointment(appointment)
