"""
Tests for scheduling/windows.py

Both window sources, horizon checks and partial-block splitting.
"""
import unittest
from datetime import date
from types import SimpleNamespace

from barberbook.scheduling.windows import (
    REASON_BLOCKED,
    REASON_CLOSED,
    REASON_NO_SLOTS_CONFIGURED,
    REASON_PAST,
    TimeWindow,
    check_booking_horizon,
    reason_too_far_ahead,
    subtract_block,
    sunday_based_weekday,
    windows_from_available_slots,
    windows_from_working_hours,
)


def row(start, end):
    return SimpleNamespace(start_time=start, end_time=end)


def hours(start="09:00", end="18:00", active=True):
    return SimpleNamespace(start_time=start, end_time=end, is_active=active)


def block(start=None, end=None):
    return SimpleNamespace(is_full_day=start is None, start_time=start, end_time=end)


class TestHorizon(unittest.TestCase):

    def test_past_date(self):
        self.assertEqual(check_booking_horizon(date(2026, 10, 18), date(2026, 10, 19), 25), REASON_PAST)

    def test_today_is_allowed(self):
        self.assertIsNone(check_booking_horizon(date(2026, 10, 19), date(2026, 10, 19), 25))

    def test_last_bookable_day(self):
        self.assertIsNone(check_booking_horizon(date(2026, 11, 13), date(2026, 10, 19), 25))

    def test_too_far_ahead(self):
        self.assertEqual(
            check_booking_horizon(date(2026, 11, 14), date(2026, 10, 19), 25),
            "Bookings are only available 25 days in advance"
        )
        self.assertEqual(reason_too_far_ahead(25), "Bookings are only available 25 days in advance")

    def test_sunday_is_zero(self):
        self.assertEqual(sunday_based_weekday(date(2026, 10, 18)), 0)
        self.assertEqual(sunday_based_weekday(date(2026, 10, 19)), 1)
        self.assertEqual(sunday_based_weekday(date(2026, 10, 24)), 6)


class TestAvailableSlotSource(unittest.TestCase):

    def test_no_rows(self):
        resolution = windows_from_available_slots([])
        self.assertFalse(resolution.is_open)
        self.assertEqual(resolution.reason, REASON_NO_SLOTS_CONFIGURED)

    def test_rows_sorted_and_deduplicated(self):
        resolution = windows_from_available_slots([
            row("14:00", "18:00"), row("09:00", "12:00"), row("14:00", "18:00"),
        ])
        self.assertEqual(resolution.windows, [TimeWindow(540, 720), TimeWindow(840, 1080)])
        self.assertIsNone(resolution.reason)

    def test_invalid_rows_are_skipped(self):
        resolution = windows_from_available_slots([row("12:00", "09:00"), row("bad", "10:00")])
        self.assertEqual(resolution.reason, REASON_NO_SLOTS_CONFIGURED)


class TestWorkingHoursSource(unittest.TestCase):

    def test_open_day(self):
        resolution = windows_from_working_hours(hours(), [])
        self.assertEqual(resolution.windows, [TimeWindow(540, 1080)])

    def test_missing_row_is_closed(self):
        self.assertEqual(windows_from_working_hours(None, []).reason, REASON_CLOSED)

    def test_inactive_row_is_closed(self):
        self.assertEqual(windows_from_working_hours(hours(active=False), []).reason, REASON_CLOSED)

    def test_full_day_block(self):
        self.assertEqual(windows_from_working_hours(hours(), [block()]).reason, REASON_BLOCKED)

    def test_full_day_block_beats_closed(self):
        self.assertEqual(windows_from_working_hours(None, [block()]).reason, REASON_BLOCKED)

    def test_partial_block_in_middle_splits_window(self):
        resolution = windows_from_working_hours(hours(), [block("12:00", "13:00")])
        self.assertEqual(resolution.windows, [TimeWindow(540, 720), TimeWindow(780, 1080)])

    def test_partial_block_at_edges_trims_window(self):
        resolution = windows_from_working_hours(hours(), [block("08:00", "10:00"), block("17:00", "19:00")])
        self.assertEqual(resolution.windows, [TimeWindow(600, 1020)])

    def test_block_covering_everything(self):
        resolution = windows_from_working_hours(hours(), [block("08:00", "19:00")])
        self.assertEqual(resolution.reason, REASON_BLOCKED)


class TestSubtractBlock(unittest.TestCase):

    def test_disjoint_block_leaves_window(self):
        self.assertEqual(subtract_block(TimeWindow(540, 720), TimeWindow(720, 780)), [TimeWindow(540, 720)])

    def test_touching_block_is_disjoint(self):
        self.assertEqual(subtract_block(TimeWindow(540, 720), TimeWindow(480, 540)), [TimeWindow(540, 720)])


if __name__ == "__main__":
    unittest.main()
