"""
Tests for scheduling/conflicts.py

Buffered overlap checks around a single 10:00-10:45 appointment with a
30 minute buffer (blocked until 10:30 + 45 = 11:15).
"""
import unittest
from datetime import timedelta
from types import SimpleNamespace

from barberbook.scheduling.conflicts import conflicting_appointments, interval_collides, overlaps
from barberbook.scheduling.timezones import combine_date_and_wall_clock

DAY = "2026-10-20"
BUFFER = 30


def at(hhmm):
    return combine_date_and_wall_clock(DAY, hhmm)


def candidate(hhmm, minutes=45):
    start = at(hhmm)
    return start, start + timedelta(minutes=minutes)


class TestIntervalCollides(unittest.TestCase):

    def setUp(self):
        self.existing = (at("10:00"), at("10:45"))

    def collides(self, hhmm):
        start, end = candidate(hhmm)
        return interval_collides(start, end, *self.existing, BUFFER)

    def test_ending_before_existing_start_is_free(self):
        self.assertFalse(self.collides("09:00"))

    def test_ending_exactly_at_existing_start_collides(self):
        self.assertTrue(self.collides("09:15"))

    def test_starting_inside_buffer_collides(self):
        self.assertTrue(self.collides("10:45"))
        self.assertTrue(self.collides("11:00"))

    def test_starting_when_buffer_elapses_is_free(self):
        self.assertFalse(self.collides("11:15"))

    def test_same_interval_collides(self):
        self.assertTrue(self.collides("10:00"))

    def test_candidate_containing_existing_collides(self):
        start = at("09:30")
        end = at("12:00")
        self.assertTrue(interval_collides(start, end, *self.existing, BUFFER))

    def test_existing_containing_candidate_collides(self):
        start = at("10:10")
        end = at("10:20")
        self.assertTrue(interval_collides(start, end, *self.existing, BUFFER))


class TestOverlaps(unittest.TestCase):

    def test_empty_list_never_overlaps(self):
        self.assertFalse(overlaps(*candidate("10:00"), [], BUFFER))

    def test_any_hit_counts(self):
        existing = [(at("13:00"), at("13:45")), (at("10:00"), at("10:45"))]
        self.assertTrue(overlaps(*candidate("11:00"), existing, BUFFER))
        self.assertFalse(overlaps(*candidate("11:15"), existing, BUFFER))

    def test_zero_buffer_allows_back_to_back(self):
        existing = [(at("10:00"), at("10:45"))]
        self.assertFalse(overlaps(*candidate("10:45"), existing, 0))

    def test_conflicting_appointments_returns_hits_only(self):
        first = SimpleNamespace(start_time=at("10:00"), end_time=at("10:45"))
        second = SimpleNamespace(start_time=at("15:00"), end_time=at("15:45"))
        hits = conflicting_appointments(*candidate("10:30"), [first, second], BUFFER)
        self.assertEqual(hits, [first])


if __name__ == "__main__":
    unittest.main()
