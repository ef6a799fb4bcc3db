"""
Business-local time helpers.

All stored instants are UTC. Everything a client sees or the scheduling
rules compare (calendar days, HH:MM wall clock) is interpreted in the
shop's fixed IANA zone, never in the server process's local zone.
"""
import re
from datetime import date, datetime, time, timedelta, timezone
from functools import lru_cache
from typing import Tuple, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from barberbook.config.settings import get_settings
from barberbook.core.exceptions import ValidationError

DATE_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
WALL_CLOCK_PATTERN = re.compile(r"^\d{2}:\d{2}$")

MINUTES_PER_DAY = 24 * 60


@lru_cache()
def _zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        raise ValueError(f"Unknown business timezone: {name}")


def business_tz() -> ZoneInfo:
    return _zone(get_settings().BUSINESS_TIMEZONE)


def to_utc(instant: datetime) -> datetime:
    """Normalize an instant to aware UTC; naive values are taken as UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def parse_date_key(value: str) -> date:
    """Parse a YYYY-MM-DD wire date."""
    if not isinstance(value, str) or not DATE_KEY_PATTERN.match(value):
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")


def parse_wall_clock(value: str) -> int:
    """Parse an HH:MM wire time into minutes since local midnight."""
    if not isinstance(value, str) or not WALL_CLOCK_PATTERN.match(value):
        raise ValidationError("Time must be in HH:MM format")
    hours, minutes = int(value[:2]), int(value[3:])
    if hours > 23 or minutes > 59:
        raise ValidationError("Time must be in HH:MM format")
    return hours * 60 + minutes


def format_wall_clock(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _as_date(value: Union[str, date]) -> date:
    return parse_date_key(value) if isinstance(value, str) else value


def business_date(instant: datetime) -> date:
    """Business-local calendar day of an instant."""
    return to_utc(instant).astimezone(business_tz()).date()


def business_date_key(instant: datetime) -> str:
    return business_date(instant).isoformat()


def local_midnight(day: Union[str, date]) -> datetime:
    """Instant (UTC) of business-local midnight starting `day`."""
    day = _as_date(day)
    return datetime.combine(day, time.min, tzinfo=business_tz()).astimezone(timezone.utc)


def business_day_range(day: Union[str, date]) -> Tuple[datetime, datetime]:
    """
    Half-open [start, end) instant range of a business-local day.

    Computed from the two local midnights, so DST days come out as 23 or
    25 hours long.
    """
    day = _as_date(day)
    return local_midnight(day), local_midnight(day + timedelta(days=1))


def combine_date_and_wall_clock(day: Union[str, date], wall_clock: Union[str, int]) -> datetime:
    """
    Interpret an HH:MM wall-clock time on a business day as an instant (UTC).

    Wall-clock values inside a spring-forward gap resolve with the offset in
    force before the transition (fold=0).
    """
    day = _as_date(day)
    minutes = parse_wall_clock(wall_clock) if isinstance(wall_clock, str) else wall_clock
    local = datetime.combine(day, time(minutes // 60, minutes % 60), tzinfo=business_tz())
    return local.astimezone(timezone.utc)


def wall_clock_minutes(instant: datetime) -> int:
    """Minutes since business-local midnight of an instant."""
    local = to_utc(instant).astimezone(business_tz())
    return local.hour * 60 + local.minute


def format_instant_wall_clock(instant: datetime) -> str:
    return format_wall_clock(wall_clock_minutes(instant))


def round_up_to_interval(instant: datetime, interval_minutes: int) -> int:
    """
    Business-local wall-clock minutes of `instant`, rounded up to the next
    multiple of `interval_minutes`. Any seconds past a boundary count as
    past it. May return MINUTES_PER_DAY or more near midnight.
    """
    local = to_utc(instant).astimezone(business_tz())
    minutes = local.hour * 60 + local.minute
    if local.second or local.microsecond:
        minutes += 1
    remainder = minutes % interval_minutes
    if remainder:
        minutes += interval_minutes - remainder
    return minutes