"""
Scheduling core: business-local time, window resolution, conflict checks
and slot generation. Pure functions over data already fetched.
"""
from barberbook.scheduling.clock import FixedClock, SystemClock, system_clock
from barberbook.scheduling.conflicts import conflicting_appointments, overlaps
from barberbook.scheduling.slots import CandidateSlot, candidate_starts, generate_slots
from barberbook.scheduling.windows import TimeWindow, WindowResolution

__all__ = [
    "FixedClock",
    "SystemClock",
    "system_clock",
    "overlaps",
    "conflicting_appointments",
    "CandidateSlot",
    "candidate_starts",
    "generate_slots",
    "TimeWindow",
    "WindowResolution",
]
