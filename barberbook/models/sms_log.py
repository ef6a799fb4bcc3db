# barberbook/models/sms_log.py
from sqlalchemy import Column, String, Text, Uuid
from sqlalchemy.sql import func
from .base import Base, UTCDateTime
import uuid


class SMSMessageType:
    CONFIRMATION = "confirmation"
    REMINDER_1DAY = "reminder_1day"
    REMINDER_1HOUR = "reminder_1hour"
    CANCELLATION = "cancellation"
    AVAILABILITY_ALERT = "availability_alert"
    MANUAL = "manual"  # free text sent from the admin dashboard

    ALL = (CONFIRMATION, REMINDER_1DAY, REMINDER_1HOUR, CANCELLATION, AVAILABILITY_ALERT, MANUAL)


class SMSLog(Base):
    __tablename__ = "sms_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    appointment_id = Column(Uuid(as_uuid=True), nullable=True, index=True)  # null for broadcast alerts

    phone_number = Column(String(20), nullable=False, index=True)
    message_type = Column(String(30), nullable=False)
    status = Column(String(20), nullable=False)  # sent, failed
    twilio_sid = Column(String, nullable=True)
    error_message = Column(Text, nullable=True)

    sent_at = Column(UTCDateTime(), server_default=func.now(), index=True)
