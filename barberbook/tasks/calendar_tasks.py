# barberbook/tasks/calendar_tasks.py
from typing import Optional
from uuid import UUID

from barberbook.config.celery_config import celery_app
from barberbook.config.database import SessionLocal
from barberbook.core.exceptions import DependencyError
from barberbook.models.appointment import Appointment
from barberbook.scheduling.clock import system_clock
from barberbook.services.calendar.calendar_sync_service import CalendarSyncService
from barberbook.services.calendar.google_calendar_service import GoogleCalendarService
import logging

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def sync_appointment_to_calendar(self, appointment_id: str):
    """Create (or refresh) the calendar event of a newly booked appointment"""
    db = SessionLocal()
    try:
        appointment = db.query(Appointment).filter_by(id=UUID(appointment_id)).first()
        if not appointment:
            logger.error(f"Appointment {appointment_id} not found")
            return {"status": "failed", "reason": "appointment_not_found"}

        event_id = CalendarSyncService.sync_appointment(db, appointment, GoogleCalendarService())
        return {"status": "success", "event_id": event_id}

    except DependencyError as exc:
        logger.error(f"Calendar sync failed for appointment {appointment_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def replace_calendar_event(self, appointment_id: str, previous_event_id: Optional[str]):
    """Delete-then-create after a reschedule"""
    db = SessionLocal()
    try:
        appointment = db.query(Appointment).filter_by(id=UUID(appointment_id)).first()
        if not appointment:
            logger.error(f"Appointment {appointment_id} not found")
            return {"status": "failed", "reason": "appointment_not_found"}

        event_id = CalendarSyncService.replace_event(
            db, appointment, previous_event_id, GoogleCalendarService()
        )
        return {"status": "success", "event_id": event_id}

    except DependencyError as exc:
        logger.error(f"Calendar replace failed for appointment {appointment_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def delete_calendar_event(self, appointment_id: str, event_id: str):
    db = SessionLocal()
    try:
        appointment = db.query(Appointment).filter_by(id=UUID(appointment_id)).first()
        CalendarSyncService.remove_event(db, appointment, event_id, GoogleCalendarService())
        return {"status": "success", "event_id": event_id}

    except DependencyError as exc:
        logger.error(f"Calendar delete failed for appointment {appointment_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
    finally:
        db.close()


@celery_app.task
def reconcile_calendar():
    db = SessionLocal()
    try:
        return CalendarSyncService.reconcile(db, system_clock.now(), GoogleCalendarService())
    except DependencyError as exc:
        # Credentials missing or refresh failed; the next hourly run tries again
        logger.error(f"Calendar reconcile aborted: {exc}")
        return {"status": "failed", "reason": exc.message}
    finally:
        db.close()
