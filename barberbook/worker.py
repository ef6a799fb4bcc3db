"""
Celery worker entry point

Runs SMS, calendar and housekeeping tasks. Reminders and the calendar
reconcile only fire when beat runs too, so __main__ embeds it.
"""
import logging
from celery.signals import worker_ready, worker_shutdown

from barberbook.config.celery_config import celery_app
from barberbook.config.settings import settings
from barberbook.utils.my_logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    tasks = sorted(name for name in celery_app.tasks if name.startswith("barberbook."))
    logger.info(f"Celery worker ready with {len(tasks)} booking tasks: {tasks}")
    for name, entry in celery_app.conf.beat_schedule.items():
        logger.info(f"Beat entry {name}: {entry['schedule']} ({settings.BUSINESS_TIMEZONE})")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    logger.info("Celery worker shutting down, queued notifications stay in the broker")


if __name__ == "__main__":
    celery_app.start([
        'worker',
        '--beat',
        '--loglevel=info',
        '--concurrency=4',
        '--max-tasks-per-child=1000'
    ])
