"""
Availability Window Resolver (pure part)

Turns configuration rows for one business date into open wall-clock
windows. Two sources exist and exactly one is authoritative per deployment:
- available slots: explicit per-date windows (whitelist)
- working hours + blocked dates: weekly template minus closures (legacy)

Loading rows from the database happens in AvailabilityService.
"""
import logging
from datetime import date
from typing import Iterable, List, NamedTuple, Optional

from barberbook.core.exceptions import ValidationError
from barberbook.scheduling.timezones import format_wall_clock, parse_wall_clock

logger = logging.getLogger(__name__)

SOURCE_AVAILABLE_SLOTS = "available_slots"
SOURCE_WORKING_HOURS = "working_hours"
SOURCES = (SOURCE_AVAILABLE_SLOTS, SOURCE_WORKING_HOURS)

REASON_PAST = "Date is in the past"
REASON_NO_SLOTS_CONFIGURED = "No available time slots configured for this date"
REASON_CLOSED = "Closed on this day"
REASON_BLOCKED = "Date is blocked"


def reason_too_far_ahead(max_advance_days: int) -> str:
    return f"Bookings are only available {max_advance_days} days in advance"


class TimeWindow(NamedTuple):
    """Open interval of business-local wall clock, minutes since midnight."""
    start: int
    end: int

    @property
    def start_label(self) -> str:
        return format_wall_clock(self.start)

    @property
    def end_label(self) -> str:
        return format_wall_clock(self.end)

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end

    def to_dict(self) -> dict:
        return {"start": self.start_label, "end": self.end_label}


class WindowResolution(NamedTuple):
    """Windows for a date, or the reason the whole date is closed."""
    windows: List[TimeWindow]
    reason: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return bool(self.windows)


def sunday_based_weekday(day: date) -> int:
    """0=Sunday ... 6=Saturday"""
    return (day.weekday() + 1) % 7


def check_booking_horizon(target: date, today: date, max_advance_days: int) -> Optional[str]:
    """Reason the date is outside the bookable horizon, or None."""
    if target < today:
        return REASON_PAST
    if (target - today).days > max_advance_days:
        return reason_too_far_ahead(max_advance_days)
    return None


def _parse_window(start_time: Optional[str], end_time: Optional[str]) -> Optional[TimeWindow]:
    try:
        start = parse_wall_clock(start_time)
        end = parse_wall_clock(end_time)
    except ValidationError:
        logger.warning(f"Skipping window with malformed times: {start_time!r}-{end_time!r}")
        return None

    if start >= end:
        logger.warning(f"Skipping empty window {start_time}-{end_time}")
        return None
    return TimeWindow(start, end)


def _sorted_unique(windows: Iterable[TimeWindow]) -> List[TimeWindow]:
    return sorted(set(windows))


def windows_from_available_slots(rows) -> WindowResolution:
    """Windows from AvailableSlot rows already filtered to the date."""
    windows = []
    for row in rows:
        window = _parse_window(row.start_time, row.end_time)
        if window:
            windows.append(window)

    if not windows:
        return WindowResolution([], REASON_NO_SLOTS_CONFIGURED)
    return WindowResolution(_sorted_unique(windows))


def subtract_block(window: TimeWindow, block: TimeWindow) -> List[TimeWindow]:
    """
    Remove a blocked interval from a window.

    Returns 0, 1 or 2 windows: a block in the middle splits the window.
    """
    if block.end <= window.start or block.start >= window.end:
        return [window]

    remaining = []
    if block.start > window.start:
        remaining.append(TimeWindow(window.start, block.start))
    if block.end < window.end:
        remaining.append(TimeWindow(block.end, window.end))
    return remaining


def windows_from_working_hours(working_hours, blocked_dates) -> WindowResolution:
    """
    Windows from the weekday's WorkingHours row minus BlockedDate rows.

    Args:
        working_hours: WorkingHours row for the weekday, or None
        blocked_dates: BlockedDate rows already filtered to the date
    """
    blocked_dates = list(blocked_dates)

    if any(blocked.is_full_day for blocked in blocked_dates):
        return WindowResolution([], REASON_BLOCKED)

    if working_hours is None or not working_hours.is_active:
        return WindowResolution([], REASON_CLOSED)

    base = _parse_window(working_hours.start_time, working_hours.end_time)
    if base is None:
        return WindowResolution([], REASON_CLOSED)

    windows = [base]
    for blocked in blocked_dates:
        block = _parse_window(blocked.start_time, blocked.end_time)
        if block is None:
            continue
        next_windows = []
        for window in windows:
            next_windows.extend(subtract_block(window, block))
        windows = next_windows

    if not windows:
        return WindowResolution([], REASON_BLOCKED)
    return WindowResolution(_sorted_unique(windows))
