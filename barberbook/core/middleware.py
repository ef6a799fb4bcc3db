# barberbook/core/middleware.py
"""Request tracing: correlation ids and access logging"""
import contextvars
import logging
import re
import time
import uuid

from starlette.requests import Request

from barberbook.utils.phone import mask_phone

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
QUIET_PATHS = ("/health",)

# Read by the logging filter so every record emitted while serving a
# request carries its id, including records from services and SQLAlchemy.
correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="-")

_PHONE_PARAM = re.compile(r"(phone_number=)([^&]+)")


def _loggable_url(request: Request) -> str:
    """Path plus query string with phone numbers masked"""
    query = request.url.query
    if not query:
        return request.url.path
    query = _PHONE_PARAM.sub(lambda m: m.group(1) + mask_phone(m.group(2)), query)
    return f"{request.url.path}?{query}"


async def correlation_id_middleware(request: Request, call_next):
    """Reuse the caller's correlation id or mint one, and echo it back"""
    correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
    request.state.correlation_id = correlation_id
    token = correlation_id_var.set(correlation_id)
    try:
        response = await call_next(request)
    finally:
        correlation_id_var.reset(token)

    response.headers[CORRELATION_HEADER] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    if request.url.path.startswith(QUIET_PATHS):
        return await call_next(request)

    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 2)

    level = logging.WARNING if response.status_code >= 500 else logging.INFO
    logger.log(
        level,
        f"{request.method} {_loggable_url(request)} -> {response.status_code} ({duration_ms} ms)",
        extra={
            "method": request.method,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
            "client": request.client.host if request.client else "unknown",
        }
    )
    return response
