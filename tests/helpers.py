"""Shared fixtures: in-memory database, business-local instants, fakes"""
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from barberbook.models import (
    Appointment,
    AppointmentStatus,
    AvailableSlot,
    Base,
    BlockedDate,
    SMSLog,
    WorkingHours,
)
from barberbook.scheduling.timezones import combine_date_and_wall_clock, local_midnight

NY = ZoneInfo("America/New_York")

# Monday 2026-10-19, 08:00 in the shop
NOW = datetime(2026, 10, 19, 8, 0, tzinfo=NY)
TODAY = "2026-10-19"
TOMORROW = "2026-10-20"


def make_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


def make_session(engine=None):
    engine = engine or make_engine()
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def local(year, month, day, hour=0, minute=0, second=0):
    return datetime(year, month, day, hour, minute, second, tzinfo=NY)


def add_slot(db, date_str, start_time="09:00", end_time="18:00", reason=None):
    slot = AvailableSlot(
        date=local_midnight(date_str),
        start_time=start_time,
        end_time=end_time,
        reason=reason,
    )
    db.add(slot)
    db.commit()
    return slot


def add_blocked_date(db, date_str, start_time=None, end_time=None, reason=None):
    blocked = BlockedDate(
        date=local_midnight(date_str),
        is_full_day=start_time is None,
        start_time=start_time,
        end_time=end_time,
        reason=reason,
    )
    db.add(blocked)
    db.commit()
    return blocked


def add_working_hours(db, day_of_week, start_time="09:00", end_time="18:00", is_active=True):
    row = WorkingHours(day_of_week=day_of_week, start_time=start_time, end_time=end_time, is_active=is_active)
    db.add(row)
    db.commit()
    return row


def add_appointment(
        db,
        date_str,
        time_str,
        phone_number="+15555550100",
        client_name="Jane Doe",
        status=AppointmentStatus.CONFIRMED,
        duration_minutes=45,
        google_event_id=None,
):
    start = combine_date_and_wall_clock(date_str, time_str)
    appointment = Appointment(
        client_name=client_name,
        phone_number=phone_number,
        date=local_midnight(date_str),
        start_time=start,
        end_time=start + timedelta(minutes=duration_minutes),
        status=status,
        google_event_id=google_event_id,
    )
    db.add(appointment)
    db.commit()
    db.refresh(appointment)
    return appointment


def add_sms_log(db, phone_number, message_type, status="sent", appointment_id=None, sent_at=None):
    log = SMSLog(
        appointment_id=appointment_id,
        phone_number=phone_number,
        message_type=message_type,
        status=status,
    )
    if sent_at is not None:
        log.sent_at = sent_at
    db.add(log)
    db.commit()
    return log


class RecordingDispatcher:
    """Stands in for the Celery-backed dispatcher; remembers every call"""

    def __init__(self):
        self.calls = []

    def appointment_booked(self, appointment):
        self.calls.append(("booked", appointment.id))

    def appointment_rescheduled(self, appointment, previous_event_id):
        self.calls.append(("rescheduled", appointment.id, previous_event_id))

    def appointment_cancelled(self, appointment):
        self.calls.append(("cancelled", appointment.id))

    def kinds(self):
        return [call[0] for call in self.calls]


class FakeSMSService:
    """Records messages and writes SMSLog rows like the real service"""

    def __init__(self, fail_for=(), now=None):
        self.sent = []
        self.fail_for = set(fail_for)
        self.now = now

    def send_sms(self, db, to_phone, message_type, body, appointment_id=None):
        from barberbook.core.exceptions import DependencyError

        if to_phone in self.fail_for:
            db.add(SMSLog(appointment_id=appointment_id, phone_number=to_phone,
                          message_type=message_type, status="failed", error_message="boom"))
            db.commit()
            raise DependencyError("twilio", "boom")

        log = SMSLog(appointment_id=appointment_id, phone_number=to_phone,
                     message_type=message_type, status="sent", twilio_sid=f"SM{len(self.sent)}")
        if self.now is not None:
            log.sent_at = self.now
        db.add(log)
        db.commit()
        self.sent.append((to_phone, message_type, body))
        return log

    def send_appointment_message(self, db, appointment, message_type):
        return self.send_sms(db, appointment.phone_number, message_type,
                             f"{message_type} for {appointment.client_name}", appointment.id)


class FakeCalendar:
    """In-memory stand-in for GoogleCalendarService"""

    def __init__(self, fail_create=False):
        self.events = {}
        self.deleted = []
        self.fail_create = fail_create
        self._next = 0

    def create_event(self, appointment):
        from barberbook.core.exceptions import DependencyError

        if self.fail_create:
            raise DependencyError("google_calendar", "create failed")
        self._next += 1
        event_id = f"evt{self._next}"
        self.events[event_id] = (appointment.start_time, appointment.end_time)
        return event_id

    def update_event(self, event_id, appointment):
        if event_id not in self.events:
            return None
        self.events[event_id] = (appointment.start_time, appointment.end_time)
        return event_id

    def delete_event(self, event_id):
        self.events.pop(event_id, None)
        self.deleted.append(event_id)
