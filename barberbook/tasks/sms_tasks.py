# barberbook/tasks/sms_tasks.py
from uuid import UUID

from barberbook.config.celery_config import celery_app
from barberbook.config.database import SessionLocal
from barberbook.core.exceptions import DependencyError
from barberbook.models.appointment import Appointment
from barberbook.scheduling.clock import system_clock
from barberbook.services.notifications.reminder_service import ReminderService
from barberbook.services.sms.sms_service import SMSService
import logging

logger = logging.getLogger(__name__)


@celery_app.task(bind=True, max_retries=3)
def send_appointment_sms(self, appointment_id: str, message_type: str):
    """Confirmation / cancellation SMS for one appointment"""
    db = SessionLocal()
    try:
        appointment = db.query(Appointment).filter_by(id=UUID(appointment_id)).first()
        if not appointment:
            logger.error(f"Appointment {appointment_id} not found")
            return {"status": "failed", "reason": "appointment_not_found"}

        log = SMSService().send_appointment_message(db, appointment, message_type)
        return {"status": "sent", "twilio_sid": log.twilio_sid}

    except DependencyError as exc:
        logger.error(f"{message_type} SMS failed for appointment {appointment_id}: {exc}")
        raise self.retry(exc=exc, countdown=60 * (self.request.retries + 1))
    finally:
        db.close()


@celery_app.task
def send_one_day_reminders():
    db = SessionLocal()
    try:
        return ReminderService.send_one_day_reminders(db, system_clock.now(), SMSService())
    finally:
        db.close()


@celery_app.task
def send_one_hour_reminders():
    db = SessionLocal()
    try:
        return ReminderService.send_one_hour_reminders(db, system_clock.now(), SMSService())
    finally:
        db.close()


@celery_app.task
def send_availability_alert():
    db = SessionLocal()
    try:
        return ReminderService.send_availability_alert(db, system_clock.now(), SMSService())
    finally:
        db.close()
