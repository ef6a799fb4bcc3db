"""
Slot Generator

Walks each open window at a fixed granularity and keeps the start times
whose full service duration fits inside the window and does not collide
with a confirmed appointment (plus buffer).
"""
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, NamedTuple

from barberbook.scheduling.conflicts import Interval, overlaps
from barberbook.scheduling.timezones import (
    MINUTES_PER_DAY,
    business_date,
    combine_date_and_wall_clock,
    format_wall_clock,
    round_up_to_interval,
    wall_clock_minutes,
)
from barberbook.scheduling.windows import TimeWindow


class CandidateSlot(NamedTuple):
    minutes: int  # wall clock, minutes since business-local midnight
    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return format_wall_clock(self.minutes)


def candidate_starts(
        target_date: date,
        windows: Iterable[TimeWindow],
        duration_minutes: int,
        interval_minutes: int,
        now: datetime
) -> List[CandidateSlot]:
    """
    Start times that fit the duration inside a window, before conflicts.

    On the business-local current day the walk starts no earlier than "now"
    rounded up to the next interval boundary. Starts produced by several
    overlapping windows appear once. Wall-clock times skipped by a DST
    transition are never offered. Result is chronological.
    """
    today = business_date(now)
    if target_date < today:
        return []

    earliest = round_up_to_interval(now, interval_minutes) if target_date == today else 0
    duration = timedelta(minutes=duration_minutes)

    found: Dict[int, CandidateSlot] = {}
    for window in windows:
        cursor = max(window.start, earliest)
        window_end = combine_date_and_wall_clock(target_date, window.end)

        while cursor < MINUTES_PER_DAY:
            start = combine_date_and_wall_clock(target_date, cursor)
            end = start + duration
            if end > window_end:
                break
            # Skip wall-clock times that do not exist (spring-forward gap)
            if cursor not in found and wall_clock_minutes(start) == cursor:
                found[cursor] = CandidateSlot(cursor, start, end)
            cursor += interval_minutes

    return [found[minutes] for minutes in sorted(found)]


def generate_slots(
        target_date: date,
        windows: Iterable[TimeWindow],
        booked: Iterable[Interval],
        duration_minutes: int,
        buffer_minutes: int,
        interval_minutes: int,
        now: datetime
) -> List[str]:
    """Bookable HH:MM start times for a date, sorted and de-duplicated."""
    booked = list(booked)
    return [
        slot.label
        for slot in candidate_starts(target_date, windows, duration_minutes, interval_minutes, now)
        if not overlaps(slot.start, slot.end, booked, buffer_minutes)
    ]
