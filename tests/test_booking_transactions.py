"""
Transaction mechanics of services/appointment/booking_service.py

Runs against a mocked session so PostgreSQL-only behavior (advisory locks,
SELECT ... FOR UPDATE) and rollback on failed commits can be observed.
"""
import unittest
import uuid
from datetime import timedelta
from unittest.mock import MagicMock, patch

from barberbook.core.exceptions import ValidationError
from barberbook.models.appointment import Appointment, AppointmentStatus
from barberbook.scheduling.slots import CandidateSlot
from barberbook.scheduling.timezones import combine_date_and_wall_clock
from barberbook.services.appointment.booking_service import BookingService, _advisory_key
from tests.helpers import NOW, TOMORROW

PHONE = "+15555550100"


def mock_session(dialect="postgresql"):
    db = MagicMock()
    db.get_bind.return_value.dialect.name = dialect
    return db


def tomorrow_slot(time_str="10:00"):
    start = combine_date_and_wall_clock(TOMORROW, time_str)
    return CandidateSlot(600, start, start + timedelta(minutes=45))


class TestAdvisoryLocks(unittest.TestCase):

    def create(self, db):
        with patch.object(BookingService, "find_active_booking", return_value=None), \
                patch.object(BookingService, "_validate_slot", return_value=tomorrow_slot()):
            return BookingService.create_appointment(db, "Jane Doe", PHONE, TOMORROW, "10:00", NOW)

    def test_locks_taken_per_key_in_sorted_order_before_insert(self):
        db = mock_session()
        self.create(db)

        steps = [c for c in db.method_calls if c[0] in ("execute", "add", "commit")]
        self.assertEqual([c[0] for c in steps], ["execute", "execute", "add", "commit"])

        for step in steps[:2]:
            self.assertIn("pg_advisory_xact_lock", str(step.args[0]))
        keys = [step.args[1]["key"] for step in steps[:2]]
        self.assertEqual(keys, [_advisory_key(f"day:{TOMORROW}"), _advisory_key(f"phone:{PHONE}")])
        self.assertIsInstance(steps[2].args[0], Appointment)

    def test_sqlite_takes_no_locks(self):
        db = mock_session("sqlite")
        self.create(db)
        db.execute.assert_not_called()
        db.commit.assert_called_once()

    def test_advisory_key_is_stable_signed_64_bit(self):
        key = _advisory_key("day:2026-10-20")
        self.assertEqual(key, _advisory_key("day:2026-10-20"))
        self.assertNotEqual(key, _advisory_key("day:2026-10-21"))
        self.assertTrue(-2 ** 63 <= key < 2 ** 63)


class TestRowLocking(unittest.TestCase):

    def test_appointment_selected_for_update(self):
        db = mock_session()
        appointment = MagicMock(status=AppointmentStatus.CONFIRMED)
        query = db.query.return_value.filter.return_value
        query.with_for_update.return_value.first.return_value = appointment

        self.assertIs(BookingService._get_for_update(db, uuid.uuid4()), appointment)
        query.with_for_update.assert_called_once_with()

    def test_cancel_reads_row_for_update(self):
        db = mock_session()
        appointment = MagicMock(status=AppointmentStatus.CONFIRMED)
        query = db.query.return_value.filter.return_value
        query.with_for_update.return_value.first.return_value = appointment

        BookingService.cancel_appointment(db, uuid.uuid4())

        query.with_for_update.assert_called_once_with()
        self.assertEqual(appointment.status, AppointmentStatus.CANCELLED)
        db.commit.assert_called_once()


class TestRollbackOnFailure(unittest.TestCase):

    def locked_row(self, db, status=AppointmentStatus.CONFIRMED):
        appointment = MagicMock(status=status)
        db.query.return_value.filter.return_value.with_for_update.return_value.first.return_value = appointment
        return appointment

    def test_mark_completed_rolls_back_failed_commit(self):
        db = mock_session()
        self.locked_row(db)
        db.commit.side_effect = RuntimeError("connection lost")

        with self.assertRaises(RuntimeError):
            BookingService.mark_completed(db, uuid.uuid4())
        db.rollback.assert_called_once()

    def test_mark_completed_rolls_back_rejected_status(self):
        db = mock_session()
        self.locked_row(db, AppointmentStatus.CANCELLED)

        with self.assertRaises(ValidationError):
            BookingService.mark_completed(db, uuid.uuid4())
        db.commit.assert_not_called()
        db.rollback.assert_called_once()

    def test_complete_past_appointments_rolls_back_failed_commit(self):
        db = mock_session()
        db.query.return_value.filter.return_value.all.return_value = [MagicMock(status=AppointmentStatus.CONFIRMED)]
        db.commit.side_effect = RuntimeError("connection lost")

        with self.assertRaises(RuntimeError):
            BookingService.complete_past_appointments(db, NOW)
        db.rollback.assert_called_once()


if __name__ == "__main__":
    unittest.main()
