# barberbook/services/availability/availability_service.py
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from barberbook.config.settings import settings
from barberbook.models.appointment import Appointment, AppointmentStatus
from barberbook.models.availability import AvailableSlot, BlockedDate, WorkingHours
from barberbook.scheduling.conflicts import as_intervals
from barberbook.scheduling.slots import generate_slots
from barberbook.scheduling.timezones import business_date, business_day_range, parse_date_key
from barberbook.scheduling.windows import (
    SOURCE_AVAILABLE_SLOTS,
    SOURCE_WORKING_HOURS,
    WindowResolution,
    check_booking_horizon,
    sunday_based_weekday,
    windows_from_available_slots,
    windows_from_working_hours,
)
import logging

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Read path: which start times can a client book on a given date"""

    @staticmethod
    def resolve_windows(
            db: Session,
            target_date: date,
            now: datetime,
            source: Optional[str] = None
    ) -> WindowResolution:
        """
        Open windows for a business date, or the reason it is closed.

        Only the configured source is consulted; the two models are never
        merged.
        """
        horizon_reason = check_booking_horizon(
            target_date, business_date(now), settings.MAX_ADVANCE_BOOKING_DAYS
        )
        if horizon_reason:
            return WindowResolution([], horizon_reason)

        source = source or settings.AVAILABILITY_SOURCE
        day_start, day_end = business_day_range(target_date)

        if source == SOURCE_AVAILABLE_SLOTS:
            rows = db.query(AvailableSlot).filter(
                AvailableSlot.date >= day_start,
                AvailableSlot.date < day_end
            ).all()
            return windows_from_available_slots(rows)

        if source == SOURCE_WORKING_HOURS:
            working_hours = db.query(WorkingHours).filter_by(
                day_of_week=sunday_based_weekday(target_date)
            ).first()
            blocked = db.query(BlockedDate).filter(
                BlockedDate.date >= day_start,
                BlockedDate.date < day_end
            ).all()
            return windows_from_working_hours(working_hours, blocked)

        raise ValueError(f"Unknown availability source: {source}")

    @staticmethod
    def confirmed_appointments(
            db: Session,
            target_date: date,
            exclude_id: Optional[UUID] = None
    ) -> List[Appointment]:
        """
        Confirmed appointments whose blocked interval can touch the date.

        Includes appointments from the previous evening whose buffer spills
        past midnight.
        """
        day_start, day_end = business_day_range(target_date)
        buffer = timedelta(minutes=settings.BUFFER_TIME)

        query = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time < day_end,
            Appointment.end_time > day_start - buffer
        )
        if exclude_id is not None:
            query = query.filter(Appointment.id != exclude_id)

        return query.order_by(Appointment.start_time.asc()).all()

    @staticmethod
    def get_availability(
            db: Session,
            date_str: str,
            now: datetime,
            source: Optional[str] = None
    ) -> Dict[str, Any]:
        """Availability payload for GET /availability"""
        target_date = parse_date_key(date_str)
        resolution = AvailabilityService.resolve_windows(db, target_date, now, source)

        if not resolution.is_open:
            logger.debug(f"{date_str} closed: {resolution.reason}")
            return AvailabilityService._response(date_str, [], resolution.reason)

        booked = as_intervals(AvailabilityService.confirmed_appointments(db, target_date))
        slots = generate_slots(
            target_date,
            resolution.windows,
            booked,
            settings.APPOINTMENT_DURATION,
            settings.BUFFER_TIME,
            settings.SLOT_INTERVAL,
            now
        )
        return AvailabilityService._response(date_str, slots)

    @staticmethod
    def available_dates(db: Session, now: datetime, source: Optional[str] = None) -> List[str]:
        """Dates from today through the booking horizon that have open windows"""
        today = business_date(now)
        dates = []
        for offset in range(settings.MAX_ADVANCE_BOOKING_DAYS + 1):
            day = today + timedelta(days=offset)
            if AvailabilityService.resolve_windows(db, day, now, source).is_open:
                dates.append(day.isoformat())
        return dates

    @staticmethod
    def _response(date_str: str, slots: List[str], reason: Optional[str] = None) -> Dict[str, Any]:
        return {
            "date": date_str,
            "available": bool(slots),
            "slots": slots,
            "reason": reason,
            "appointment_duration": settings.APPOINTMENT_DURATION,
            "buffer_time": settings.BUFFER_TIME,
        }
