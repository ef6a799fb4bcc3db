# barberbook/services/calendar/calendar_sync_service.py
from datetime import datetime
from typing import Dict, Optional
import logging

from sqlalchemy.orm import Session

from barberbook.core.exceptions import DependencyError
from barberbook.models.appointment import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)


class CalendarSyncService:
    """Keeps google_event_id and the external calendar in step with appointments"""

    @staticmethod
    def sync_appointment(db: Session, appointment: Appointment, calendar) -> Optional[str]:
        """
        Create or update the event of a confirmed appointment.

        Returns the event id, or None when the appointment is not confirmed.
        """
        if appointment.status != AppointmentStatus.CONFIRMED:
            return None

        if appointment.google_event_id:
            event_id = calendar.update_event(appointment.google_event_id, appointment)
            if event_id:
                return event_id

        event_id = calendar.create_event(appointment)
        appointment.google_event_id = event_id
        db.commit()
        return event_id

    @staticmethod
    def replace_event(
            db: Session,
            appointment: Appointment,
            previous_event_id: Optional[str],
            calendar
    ) -> Optional[str]:
        """Delete the event of the old time and create one for the new time"""
        if previous_event_id:
            try:
                calendar.delete_event(previous_event_id)
            except DependencyError as e:
                logger.error(f"Could not delete old event {previous_event_id} of {appointment.id}: {e}")

            if appointment.google_event_id == previous_event_id:
                appointment.google_event_id = None
                db.commit()

        return CalendarSyncService.sync_appointment(db, appointment, calendar)

    @staticmethod
    def remove_event(db: Session, appointment: Optional[Appointment], event_id: str, calendar) -> None:
        calendar.delete_event(event_id)
        if appointment is not None and appointment.google_event_id == event_id:
            appointment.google_event_id = None
            db.commit()

    @staticmethod
    def reconcile(db: Session, now: datetime, calendar) -> Dict[str, int]:
        """
        Bring the calendar in line with the database.

        Cancelled appointments lose their events; upcoming confirmed ones get
        an event created or refreshed. One failure does not stop the run.
        """
        results = {"created": 0, "updated": 0, "deleted": 0, "failed": 0}

        cancelled = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CANCELLED,
            Appointment.google_event_id.isnot(None)
        ).all()
        for appointment in cancelled:
            try:
                CalendarSyncService.remove_event(db, appointment, appointment.google_event_id, calendar)
                results["deleted"] += 1
            except DependencyError as e:
                logger.error(f"Reconcile: delete failed for {appointment.id}: {e}")
                results["failed"] += 1

        upcoming = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time >= now
        ).order_by(Appointment.start_time.asc()).all()
        for appointment in upcoming:
            previous_event_id = appointment.google_event_id
            try:
                event_id = CalendarSyncService.sync_appointment(db, appointment, calendar)
            except DependencyError as e:
                logger.error(f"Reconcile: sync failed for {appointment.id}: {e}")
                results["failed"] += 1
                continue
            if previous_event_id and event_id == previous_event_id:
                results["updated"] += 1
            else:
                results["created"] += 1

        logger.info(f"Calendar reconcile: {results}")
        return results
