"""
Conflict Engine

Decides whether a candidate appointment interval collides with confirmed
appointments. The same function backs slot generation (read path) and the
booking/reschedule re-check (write path).

Each existing appointment blocks [start, end + buffer). A candidate
[start, end) collides when any of these holds:
  1. candidate start falls in [existing start, blocked end)
  2. candidate end falls in [existing start, blocked end]
  3. existing start falls in [candidate start, candidate end)
  4. blocked end falls in (candidate start, candidate end]
Clauses 3 and 4 catch containment in either direction. A candidate may
start exactly when the buffer elapses but may not end exactly when an
existing appointment begins.

Callers pass confirmed appointments only.
"""
from datetime import datetime, timedelta
from typing import Iterable, List, Tuple, TypeVar

from barberbook.scheduling.timezones import to_utc

Interval = Tuple[datetime, datetime]
T = TypeVar("T")


def blocked_interval(start: datetime, end: datetime, buffer_minutes: int) -> Interval:
    return to_utc(start), to_utc(end) + timedelta(minutes=buffer_minutes)


def interval_collides(
        candidate_start: datetime,
        candidate_end: datetime,
        existing_start: datetime,
        existing_end: datetime,
        buffer_minutes: int
) -> bool:
    candidate_start, candidate_end = to_utc(candidate_start), to_utc(candidate_end)
    block_start, block_end = blocked_interval(existing_start, existing_end, buffer_minutes)

    return (
        (block_start <= candidate_start < block_end)
        or (block_start <= candidate_end <= block_end)
        or (candidate_start <= block_start < candidate_end)
        or (candidate_start < block_end <= candidate_end)
    )


def as_intervals(appointments) -> List[Interval]:
    """(start, end) pairs from objects exposing start_time/end_time."""
    return [(appt.start_time, appt.end_time) for appt in appointments]


def overlaps(
        candidate_start: datetime,
        candidate_end: datetime,
        existing: Iterable[Interval],
        buffer_minutes: int
) -> bool:
    """True if the candidate collides with any existing interval."""
    return any(
        interval_collides(candidate_start, candidate_end, start, end, buffer_minutes)
        for start, end in existing
    )


def conflicting_appointments(
        candidate_start: datetime,
        candidate_end: datetime,
        appointments: Iterable[T],
        buffer_minutes: int
) -> List[T]:
    """Appointments (anything with start_time/end_time) the candidate hits."""
    return [
        appt for appt in appointments
        if interval_collides(candidate_start, candidate_end, appt.start_time, appt.end_time, buffer_minutes)
    ]
