# barberbook/utils/my_logging.py
"""Logging configuration shared by the API process and the Celery worker"""
import logging
import sys

from barberbook.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# Third-party loggers that drown out booking activity at INFO
NOISY_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic",
    "httpx",
    "twilio.http_client",
    "googleapiclient.discovery",
    "googleapiclient.discovery_cache",
    "uvicorn.access",
)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the correlation id of the request being served"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            from barberbook.core.middleware import correlation_id_var

            record.correlation_id = correlation_id_var.get()
        return True


def setup_logging(verbose=True):
    """
    Configure root logging to stdout.

    verbose=False drops everything below WARNING, which is what the
    worker wants when started from scripts.
    """
    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO) if verbose else logging.WARNING

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(CorrelationIdFilter())
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=[handler], force=True)

    quiet_level = logging.WARNING if verbose else logging.ERROR
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)
