# barberbook/tasks/appointment_tasks.py
from barberbook.config.celery_config import celery_app
from barberbook.config.database import SessionLocal
from barberbook.scheduling.clock import system_clock
from barberbook.services.appointment.booking_service import BookingService


@celery_app.task
def complete_past_appointments():
    """Confirmed appointments whose end has passed become completed"""
    db = SessionLocal()
    try:
        return {"completed": BookingService.complete_past_appointments(db, system_clock.now())}
    finally:
        db.close()
