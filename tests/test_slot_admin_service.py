"""
Tests for services/availability/slot_admin_service.py
"""
import unittest
import uuid
from datetime import date

from barberbook.core.exceptions import NotFoundError, ValidationError
from barberbook.models.availability import AvailableSlot, WorkingHours
from barberbook.scheduling.timezones import business_date
from barberbook.services.availability.slot_admin_service import SlotAdminService, week_start
from tests.helpers import NOW, TOMORROW, add_slot, make_session


def slot_days(db, start, end):
    rows = db.query(AvailableSlot).all()
    return sorted(
        (business_date(row.date).isoformat(), row.start_time, row.end_time)
        for row in rows
        if start <= business_date(row.date).isoformat() <= end
    )


class TestAvailableSlots(unittest.TestCase):

    def setUp(self):
        self.db = make_session()

    def tearDown(self):
        self.db.close()

    def test_create_and_serialize(self):
        slot = SlotAdminService.create_available_slot(self.db, TOMORROW, "09:00", "12:00", "Morning")
        data = SlotAdminService.serialize_slot(slot)
        self.assertEqual(data["date"], TOMORROW)
        self.assertEqual((data["start_time"], data["end_time"], data["reason"]), ("09:00", "12:00", "Morning"))

    def test_create_rejects_inverted_range(self):
        with self.assertRaises(ValidationError):
            SlotAdminService.create_available_slot(self.db, TOMORROW, "12:00", "09:00")

    def test_list_hides_past_by_default(self):
        add_slot(self.db, "2026-10-18")
        add_slot(self.db, TOMORROW)
        self.assertEqual(len(SlotAdminService.list_available_slots(self.db, NOW)), 1)
        self.assertEqual(len(SlotAdminService.list_available_slots(self.db, NOW, include_past=True)), 2)

    def test_delete(self):
        slot = add_slot(self.db, TOMORROW)
        SlotAdminService.delete_available_slot(self.db, slot.id)
        self.assertEqual(self.db.query(AvailableSlot).count(), 0)
        with self.assertRaises(NotFoundError):
            SlotAdminService.delete_available_slot(self.db, uuid.uuid4())


class TestDuplicateWeek(unittest.TestCase):
    # NOW is Monday 2026-10-19; the current week started Sunday 2026-10-18

    def setUp(self):
        self.db = make_session()

    def tearDown(self):
        self.db.close()

    def test_week_start_is_sunday(self):
        self.assertEqual(week_start(date(2026, 10, 19)), date(2026, 10, 18))
        self.assertEqual(week_start(date(2026, 10, 18)), date(2026, 10, 18))
        self.assertEqual(week_start(date(2026, 10, 24)), date(2026, 10, 18))

    def test_copies_remaining_days_into_next_week(self):
        add_slot(self.db, "2026-10-18", "10:00", "14:00")  # Sunday, already past
        add_slot(self.db, "2026-10-20", "09:00", "12:00")  # Tuesday
        add_slot(self.db, "2026-10-20", "13:00", "18:00")
        add_slot(self.db, "2026-10-23", "09:00", "17:00")  # Friday

        result = SlotAdminService.duplicate_current_week(self.db, NOW)

        self.assertEqual(result["created"], 3)
        self.assertEqual(result["target_week_start"], "2026-10-25")
        self.assertEqual(slot_days(self.db, "2026-10-25", "2026-10-31"), [
            ("2026-10-27", "09:00", "12:00"),
            ("2026-10-27", "13:00", "18:00"),
            ("2026-10-30", "09:00", "17:00"),
        ])

    def test_duplicate_windows_are_collapsed(self):
        add_slot(self.db, "2026-10-20", "09:00", "12:00")
        add_slot(self.db, "2026-10-20", "09:00", "12:00")
        result = SlotAdminService.duplicate_current_week(self.db, NOW)
        self.assertEqual(result["created"], 1)

    def test_repeated_presses_fill_following_weeks(self):
        add_slot(self.db, "2026-10-20", "09:00", "12:00")
        first = SlotAdminService.duplicate_current_week(self.db, NOW)
        second = SlotAdminService.duplicate_current_week(self.db, NOW)
        self.assertEqual(first["target_week_start"], "2026-10-25")
        self.assertEqual(second["target_week_start"], "2026-11-01")

    def test_nothing_left_this_week(self):
        add_slot(self.db, "2026-10-18", "09:00", "12:00")
        with self.assertRaises(ValidationError):
            SlotAdminService.duplicate_current_week(self.db, NOW)


class TestBlockedDates(unittest.TestCase):

    def setUp(self):
        self.db = make_session()

    def tearDown(self):
        self.db.close()

    def test_full_day_drops_times(self):
        blocked = SlotAdminService.create_blocked_date(self.db, TOMORROW, True, "09:00", "10:00", "Holiday")
        self.assertTrue(blocked.is_full_day)
        self.assertIsNone(blocked.start_time)

    def test_partial_requires_times(self):
        with self.assertRaises(ValidationError):
            SlotAdminService.create_blocked_date(self.db, TOMORROW, False, "09:00", None)
        with self.assertRaises(ValidationError):
            SlotAdminService.create_blocked_date(self.db, TOMORROW, False, "11:00", "10:00")

    def test_list_and_delete(self):
        blocked = SlotAdminService.create_blocked_date(self.db, TOMORROW, False, "12:00", "13:00")
        listed = [SlotAdminService.serialize_blocked_date(b) for b in SlotAdminService.list_blocked_dates(self.db, NOW)]
        self.assertEqual(listed[0]["date"], TOMORROW)
        SlotAdminService.delete_blocked_date(self.db, blocked.id)
        self.assertEqual(SlotAdminService.list_blocked_dates(self.db, NOW), [])


class TestWorkingHours(unittest.TestCase):

    def setUp(self):
        self.db = make_session()

    def tearDown(self):
        self.db.close()

    def test_defaults_for_unsaved_days(self):
        days = SlotAdminService.get_working_hours(self.db)
        self.assertEqual(len(days), 7)
        self.assertFalse(days[0]["is_active"])
        self.assertTrue(days[1]["is_active"])
        self.assertFalse(days[6]["is_active"])
        self.assertIsNone(days[3]["id"])

    def test_update_upserts(self):
        SlotAdminService.update_working_hours(self.db, [
            {"day_of_week": 6, "start_time": "10:00", "end_time": "14:00", "is_active": True},
        ])
        days = SlotAdminService.update_working_hours(self.db, [
            {"day_of_week": 6, "start_time": "10:00", "end_time": "15:00", "is_active": True},
        ])
        self.assertEqual(self.db.query(WorkingHours).count(), 1)
        self.assertEqual(days[6]["end_time"], "15:00")
        self.assertIsNotNone(days[6]["id"])


if __name__ == "__main__":
    unittest.main()
