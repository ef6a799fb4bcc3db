"""
Tests for services/availability/availability_service.py

Window loading from either source and the availability payload.
"""
import unittest

from barberbook.core.exceptions import ValidationError
from barberbook.models.appointment import AppointmentStatus
from barberbook.scheduling.windows import (
    REASON_BLOCKED,
    REASON_CLOSED,
    REASON_NO_SLOTS_CONFIGURED,
    REASON_PAST,
    SOURCE_WORKING_HOURS,
    TimeWindow,
)
from barberbook.services.availability.availability_service import AvailabilityService
from tests.helpers import (
    NOW,
    TODAY,
    TOMORROW,
    add_appointment,
    add_blocked_date,
    add_slot,
    add_working_hours,
    local,
    make_session,
)


class TestGetAvailability(unittest.TestCase):

    def setUp(self):
        self.db = make_session()

    def tearDown(self):
        self.db.close()

    def test_open_day_payload(self):
        add_slot(self.db, TOMORROW, "09:00", "18:00")
        result = AvailabilityService.get_availability(self.db, TOMORROW, NOW)

        self.assertTrue(result["available"])
        self.assertEqual(result["slots"][0], "09:00")
        self.assertEqual(result["slots"][-1], "17:15")
        self.assertIsNone(result["reason"])
        self.assertEqual(result["appointment_duration"], 45)
        self.assertEqual(result["buffer_time"], 30)

    def test_no_configured_slots(self):
        result = AvailabilityService.get_availability(self.db, TOMORROW, NOW)
        self.assertEqual(result, {
            "date": TOMORROW,
            "available": False,
            "slots": [],
            "reason": REASON_NO_SLOTS_CONFIGURED,
            "appointment_duration": 45,
            "buffer_time": 30,
        })

    def test_past_date(self):
        add_slot(self.db, "2026-10-18")
        self.assertEqual(AvailabilityService.get_availability(self.db, "2026-10-18", NOW)["reason"], REASON_PAST)

    def test_beyond_horizon(self):
        add_slot(self.db, "2026-11-14")
        result = AvailabilityService.get_availability(self.db, "2026-11-14", NOW)
        self.assertEqual(result["reason"], "Bookings are only available 25 days in advance")

    def test_malformed_date(self):
        with self.assertRaises(ValidationError):
            AvailabilityService.get_availability(self.db, "tomorrow", NOW)

    def test_slots_of_other_days_are_ignored(self):
        add_slot(self.db, "2026-10-21", "09:00", "18:00")
        result = AvailabilityService.get_availability(self.db, TOMORROW, NOW)
        self.assertEqual(result["reason"], REASON_NO_SLOTS_CONFIGURED)

    def test_confirmed_appointment_suppresses_slots(self):
        add_slot(self.db, TOMORROW, "09:00", "18:00")
        add_appointment(self.db, TOMORROW, "10:00")
        add_appointment(self.db, TOMORROW, "15:00", status=AppointmentStatus.CANCELLED)

        slots = AvailabilityService.get_availability(self.db, TOMORROW, NOW)["slots"]
        self.assertIn("09:00", slots)
        self.assertNotIn("09:15", slots)
        self.assertNotIn("11:00", slots)
        self.assertIn("11:15", slots)
        self.assertIn("15:00", slots)

    def test_fully_booked_is_unavailable_without_reason(self):
        add_slot(self.db, TOMORROW, "09:00", "09:45")
        add_appointment(self.db, TOMORROW, "09:00")
        result = AvailabilityService.get_availability(self.db, TOMORROW, NOW)
        self.assertFalse(result["available"])
        self.assertIsNone(result["reason"])

    def test_today_is_truncated(self):
        add_slot(self.db, TODAY, "07:00", "12:00")
        result = AvailabilityService.get_availability(self.db, TODAY, local(2026, 10, 19, 9, 52))
        self.assertEqual(result["slots"][0], "10:00")

    def test_previous_evening_buffer_spills_into_day(self):
        add_slot(self.db, TOMORROW, "00:00", "03:00")
        add_appointment(self.db, TODAY, "23:30")  # ends 00:15, blocked until 00:45
        slots = AvailabilityService.get_availability(self.db, TOMORROW, NOW)["slots"]
        self.assertNotIn("00:30", slots)
        self.assertEqual(slots[0], "00:45")


class TestWorkingHoursSource(unittest.TestCase):

    def setUp(self):
        self.db = make_session()
        add_working_hours(self.db, 2, "09:00", "17:00")  # Tuesday
        add_working_hours(self.db, 3, "09:00", "17:00", is_active=False)

    def tearDown(self):
        self.db.close()

    def resolve(self, date_str):
        from barberbook.scheduling.timezones import parse_date_key

        return AvailabilityService.resolve_windows(self.db, parse_date_key(date_str), NOW, SOURCE_WORKING_HOURS)

    def test_weekday_template(self):
        self.assertEqual(self.resolve(TOMORROW).windows, [TimeWindow(540, 1020)])

    def test_inactive_day(self):
        self.assertEqual(self.resolve("2026-10-21").reason, REASON_CLOSED)

    def test_day_without_row(self):
        self.assertEqual(self.resolve("2026-10-22").reason, REASON_CLOSED)

    def test_full_day_block(self):
        add_blocked_date(self.db, TOMORROW, reason="Holiday")
        self.assertEqual(self.resolve(TOMORROW).reason, REASON_BLOCKED)

    def test_partial_block_splits_day(self):
        add_blocked_date(self.db, TOMORROW, "12:00", "13:00")
        self.assertEqual(self.resolve(TOMORROW).windows, [TimeWindow(540, 720), TimeWindow(780, 1020)])

    def test_available_slot_rows_are_not_consulted(self):
        add_slot(self.db, "2026-10-22", "09:00", "18:00")
        self.assertEqual(self.resolve("2026-10-22").reason, REASON_CLOSED)

    def test_payload_for_split_day(self):
        add_blocked_date(self.db, TOMORROW, "12:00", "13:00")
        slots = AvailabilityService.get_availability(self.db, TOMORROW, NOW, SOURCE_WORKING_HOURS)["slots"]
        self.assertIn("11:15", slots)
        self.assertNotIn("11:30", slots)
        self.assertIn("13:00", slots)


class TestAvailableDates(unittest.TestCase):

    def setUp(self):
        self.db = make_session()

    def tearDown(self):
        self.db.close()

    def test_lists_configured_dates_inside_horizon(self):
        add_slot(self.db, "2026-10-18")
        add_slot(self.db, TOMORROW)
        add_slot(self.db, "2026-10-25")
        add_slot(self.db, "2026-12-01")
        self.assertEqual(AvailabilityService.available_dates(self.db, NOW), [TOMORROW, "2026-10-25"])


if __name__ == "__main__":
    unittest.main()
