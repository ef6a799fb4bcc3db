# barberbook/services/appointment/booking_service.py
"""
Booking / Reschedule / Cancel

Write path for appointments. Every mutation re-validates against the same
window resolver, candidate grid and conflict engine the read path uses, so
an accepted booking is always a start time the availability endpoint could
have offered. Side effects (SMS, calendar) are dispatched after commit and
never fail the request.
"""
import hashlib
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.orm import Session

from barberbook.config.settings import settings
from barberbook.core.exceptions import (
    AppointmentNotFoundError,
    ConflictError,
    ExistingAppointmentConflict,
    UnavailableError,
    ValidationError,
)
from barberbook.models.appointment import Appointment, AppointmentStatus
from barberbook.scheduling.conflicts import conflicting_appointments
from barberbook.scheduling.slots import CandidateSlot, candidate_starts
from barberbook.scheduling.timezones import (
    business_date,
    combine_date_and_wall_clock,
    local_midnight,
    parse_date_key,
    parse_wall_clock,
    round_up_to_interval,
)
from barberbook.services.availability.availability_service import AvailabilityService
from barberbook.utils.phone import mask_phone
import logging

logger = logging.getLogger(__name__)

MESSAGE_DAY_UNAVAILABLE = "Selected date is not available for appointments"
MESSAGE_OUTSIDE_HOURS = "Selected time is not within available hours"
MESSAGE_TIME_PASSED = "Selected time has already passed"
MESSAGE_SLOT_TAKEN = "This time slot is no longer available"

REASON_OUTSIDE_HOURS = "Outside available hours"
REASON_TIME_PASSED = "Time has already passed"


def _advisory_key(value: str) -> int:
    """Stable signed 64-bit key for pg_advisory_xact_lock"""
    return int.from_bytes(hashlib.sha256(value.encode()).digest()[:8], "big", signed=True)


class BookingService:
    """Create, reschedule and cancel appointments"""

    # ==================== CREATE ====================

    @staticmethod
    def create_appointment(
            db: Session,
            client_name: str,
            phone_number: str,
            date_str: str,
            time_str: str,
            now: datetime,
            dispatcher=None
    ) -> Appointment:
        """
        Book a new confirmed appointment.

        Raises:
            ValidationError: malformed date or time
            ExistingAppointmentConflict: phone already holds an upcoming booking
            UnavailableError: date closed or time outside the offered grid
            ConflictError: time collides with a confirmed appointment
        """
        target_date = parse_date_key(date_str)
        minutes = parse_wall_clock(time_str)

        try:
            BookingService._lock(db, f"day:{date_str}", f"phone:{phone_number}")

            existing = BookingService.find_active_booking(db, phone_number, now)
            if existing:
                raise ExistingAppointmentConflict(existing)

            slot = BookingService._validate_slot(db, target_date, minutes, now)

            appointment = Appointment(
                client_name=client_name,
                phone_number=phone_number,
                date=local_midnight(target_date),
                start_time=slot.start,
                end_time=slot.end,
                status=AppointmentStatus.CONFIRMED
            )
            db.add(appointment)
            db.commit()
            db.refresh(appointment)
        except Exception:
            db.rollback()
            raise

        logger.info(
            f"Booked appointment {appointment.id} for {mask_phone(phone_number)} "
            f"at {slot.start.isoformat()}"
        )
        if dispatcher:
            dispatcher.appointment_booked(appointment)
        return appointment

    # ==================== RESCHEDULE ====================

    @staticmethod
    def reschedule_appointment(
            db: Session,
            appointment_id: UUID,
            date_str: str,
            time_str: str,
            now: datetime,
            dispatcher=None
    ) -> Appointment:
        """
        Move an appointment to a new start time, in place.

        A cancelled appointment is revived as confirmed, which subjects it to
        the one-upcoming-booking-per-phone rule again. The appointment's own
        current interval never conflicts with its new one.
        """
        target_date = parse_date_key(date_str)
        minutes = parse_wall_clock(time_str)

        try:
            appointment = BookingService._get_for_update(db, appointment_id)

            if appointment.status == AppointmentStatus.COMPLETED:
                raise ValidationError("Completed appointments cannot be rescheduled")

            new_start = combine_date_and_wall_clock(target_date, minutes)
            if new_start <= now:
                raise ValidationError("Cannot reschedule to a past time")

            BookingService._lock(db, f"day:{date_str}", f"phone:{appointment.phone_number}")

            if appointment.status == AppointmentStatus.CANCELLED:
                existing = BookingService.find_active_booking(
                    db, appointment.phone_number, now, exclude_id=appointment.id
                )
                if existing:
                    raise ExistingAppointmentConflict(existing)

            slot = BookingService._validate_slot(
                db, target_date, minutes, now, exclude_id=appointment.id
            )

            previous_event_id = appointment.google_event_id
            appointment.date = local_midnight(target_date)
            appointment.start_time = slot.start
            appointment.end_time = slot.end
            appointment.status = AppointmentStatus.CONFIRMED
            db.commit()
            db.refresh(appointment)
        except Exception:
            db.rollback()
            raise

        logger.info(f"Rescheduled appointment {appointment.id} to {slot.start.isoformat()}")
        if dispatcher:
            dispatcher.appointment_rescheduled(appointment, previous_event_id)
        return appointment

    # ==================== CANCEL ====================

    @staticmethod
    def cancel_appointment(db: Session, appointment_id: UUID, dispatcher=None) -> Appointment:
        """Cancel an appointment. Cancelling twice is a no-op."""
        try:
            appointment = BookingService._get_for_update(db, appointment_id)

            if appointment.status == AppointmentStatus.CANCELLED:
                db.rollback()
                return appointment
            if appointment.status == AppointmentStatus.COMPLETED:
                raise ValidationError("Completed appointments cannot be cancelled")

            appointment.status = AppointmentStatus.CANCELLED
            db.commit()
            db.refresh(appointment)
        except Exception:
            db.rollback()
            raise

        logger.info(f"Cancelled appointment {appointment.id}")
        if dispatcher:
            dispatcher.appointment_cancelled(appointment)
        return appointment

    # ==================== STATUS ====================

    @staticmethod
    def mark_completed(db: Session, appointment_id: UUID) -> Appointment:
        """Mark a confirmed appointment as completed (no notifications)."""
        try:
            appointment = BookingService._get_for_update(db, appointment_id)

            if appointment.status == AppointmentStatus.COMPLETED:
                db.rollback()
                return appointment
            if appointment.status == AppointmentStatus.CANCELLED:
                raise ValidationError("Cancelled appointments cannot be completed")

            appointment.status = AppointmentStatus.COMPLETED
            db.commit()
            db.refresh(appointment)
        except Exception:
            db.rollback()
            raise

        return appointment

    @staticmethod
    def update_status(db: Session, appointment_id: UUID, status: str, dispatcher=None) -> Appointment:
        if status == AppointmentStatus.CANCELLED:
            return BookingService.cancel_appointment(db, appointment_id, dispatcher)
        if status == AppointmentStatus.COMPLETED:
            return BookingService.mark_completed(db, appointment_id)
        raise ValidationError(f"Unsupported status: {status}")

    @staticmethod
    def complete_past_appointments(db: Session, now: datetime) -> int:
        """Flip confirmed appointments whose end has passed to completed."""
        try:
            past = db.query(Appointment).filter(
                Appointment.status == AppointmentStatus.CONFIRMED,
                Appointment.end_time <= now
            ).all()

            for appointment in past:
                appointment.status = AppointmentStatus.COMPLETED
            db.commit()
        except Exception:
            db.rollback()
            raise

        if past:
            logger.info(f"Auto-completed {len(past)} appointments")
        return len(past)

    # ==================== QUERIES ====================

    @staticmethod
    def get_appointment(db: Session, appointment_id: UUID) -> Appointment:
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    @staticmethod
    def find_active_booking(
            db: Session,
            phone_number: str,
            now: datetime,
            exclude_id: Optional[UUID] = None
    ) -> Optional[Appointment]:
        """The phone's upcoming confirmed appointment, if any"""
        query = db.query(Appointment).filter(
            Appointment.phone_number == phone_number,
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time > now
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)
        return query.order_by(Appointment.start_time.asc()).first()

    # ==================== HELPERS ====================

    @staticmethod
    def _validate_slot(
            db: Session,
            target_date,
            minutes: int,
            now: datetime,
            exclude_id: Optional[UUID] = None
    ) -> CandidateSlot:
        resolution = AvailabilityService.resolve_windows(db, target_date, now)
        if not resolution.is_open:
            raise UnavailableError(MESSAGE_DAY_UNAVAILABLE, resolution.reason)

        grid = candidate_starts(
            target_date,
            resolution.windows,
            settings.APPOINTMENT_DURATION,
            settings.SLOT_INTERVAL,
            now
        )
        slot = next((candidate for candidate in grid if candidate.minutes == minutes), None)
        if slot is None:
            if BookingService._already_passed(target_date, minutes, now):
                raise UnavailableError(MESSAGE_TIME_PASSED, REASON_TIME_PASSED)
            raise UnavailableError(MESSAGE_OUTSIDE_HOURS, REASON_OUTSIDE_HOURS)

        confirmed = AvailabilityService.confirmed_appointments(db, target_date, exclude_id=exclude_id)
        hits: List[Appointment] = conflicting_appointments(
            slot.start, slot.end, confirmed, settings.BUFFER_TIME
        )
        if hits:
            logger.info(f"Slot {target_date} {slot.label} conflicts with {hits[0].id}")
            raise ConflictError(MESSAGE_SLOT_TAKEN, reason="conflict")
        return slot

    @staticmethod
    def _already_passed(target_date, minutes: int, now: datetime) -> bool:
        if target_date != business_date(now):
            return False
        return minutes < round_up_to_interval(now, settings.SLOT_INTERVAL)

    @staticmethod
    def _get_for_update(db: Session, appointment_id: UUID) -> Appointment:
        appointment = db.query(Appointment).filter(
            Appointment.id == appointment_id
        ).with_for_update().first()
        if not appointment:
            db.rollback()
            raise AppointmentNotFoundError(appointment_id)
        return appointment

    @staticmethod
    def _lock(db: Session, *keys: str) -> None:
        """
        Serialize writers on the same business day and phone number.

        Transaction-scoped advisory locks on PostgreSQL, taken in sorted order.
        SQLite serializes writers itself.
        """
        if db.get_bind().dialect.name != "postgresql":
            return
        for key in sorted(keys):
            db.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": _advisory_key(key)})
