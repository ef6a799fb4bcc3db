# barberbook/models/__init__.py
from .base import Base, UTCDateTime
from .appointment import Appointment, AppointmentStatus
from .availability import AvailableSlot, BlockedDate, WorkingHours
from .sms_log import SMSLog, SMSMessageType

__all__ = [
    "Base",
    "UTCDateTime",
    "Appointment",
    "AppointmentStatus",
    "AvailableSlot",
    "BlockedDate",
    "WorkingHours",
    "SMSLog",
    "SMSMessageType",
]
