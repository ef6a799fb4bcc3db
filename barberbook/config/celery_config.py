"""
Celery application configuration
Broker/backend on Redis, beat schedule for the periodic appointment jobs
"""
from celery import Celery
from celery.schedules import crontab

from barberbook.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure the Celery application"""
    app = Celery(
        "barberbook",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "barberbook.tasks.sms_tasks",
            "barberbook.tasks.calendar_tasks",
            "barberbook.tasks.appointment_tasks",
        ],
    )

    app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        result_serializer="json",
        accept_content=["json"],
        # Crontab entries below are business-local wall clock
        timezone=settings.BUSINESS_TIMEZONE,
        enable_utc=True,
        task_acks_late=True,
        worker_prefetch_multiplier=1,
        result_expires=3600,
    )

    app.conf.beat_schedule = {
        "send-one-day-reminders": {
            "task": "barberbook.tasks.sms_tasks.send_one_day_reminders",
            "schedule": crontab(hour=8, minute=0),
        },
        "send-one-hour-reminders": {
            "task": "barberbook.tasks.sms_tasks.send_one_hour_reminders",
            "schedule": crontab(minute="*/5"),
        },
        "complete-past-appointments": {
            "task": "barberbook.tasks.appointment_tasks.complete_past_appointments",
            "schedule": crontab(minute="*/15"),
        },
        "reconcile-calendar": {
            "task": "barberbook.tasks.calendar_tasks.reconcile_calendar",
            "schedule": crontab(minute=0),
        },
    }

    return app


celery_app = create_celery_app()
