# barberbook/models/appointment.py
from sqlalchemy import Column, Index, String, Uuid
from sqlalchemy.sql import func
from .base import Base, UTCDateTime
import uuid


class AppointmentStatus:
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

    ALL = (CONFIRMED, CANCELLED, COMPLETED)


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        Index("idx_appointments_status_start", "status", "start_time"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Client info
    client_name = Column(String(50), nullable=False)
    phone_number = Column(String(20), nullable=False, index=True)  # +1XXXXXXXXXX

    # Business-local midnight of the appointment day, as an instant
    date = Column(UTCDateTime(), nullable=False, index=True)
    start_time = Column(UTCDateTime(), nullable=False)
    end_time = Column(UTCDateTime(), nullable=False)

    # Only confirmed appointments occupy the chair
    status = Column(String(20), nullable=False, default=AppointmentStatus.CONFIRMED, index=True)

    # Calendar sync
    google_event_id = Column(String, nullable=True)

    created_at = Column(UTCDateTime(), server_default=func.now())
    updated_at = Column(UTCDateTime(), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Appointment(id={self.id}, start={self.start_time}, status={self.status})>"

    @property
    def is_confirmed(self) -> bool:
        return self.status == AppointmentStatus.CONFIRMED
