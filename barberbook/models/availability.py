# barberbook/models/availability.py
from sqlalchemy import Column, String, Integer, Boolean, Uuid
from sqlalchemy.sql import func
from barberbook.models.base import Base, UTCDateTime
import uuid


class AvailableSlot(Base):
    """Explicit open window on one business date (whitelist model)"""
    __tablename__ = "available_slots"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    date = Column(UTCDateTime(), nullable=False, index=True)  # business-local midnight
    start_time = Column(String(5), nullable=False)  # HH:MM business-local
    end_time = Column(String(5), nullable=False)  # HH:MM business-local
    reason = Column(String, nullable=True)

    created_at = Column(UTCDateTime(), server_default=func.now())


class BlockedDate(Base):
    """Full or partial day closure (working-hours model)"""
    __tablename__ = "blocked_dates"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    date = Column(UTCDateTime(), nullable=False, index=True)
    is_full_day = Column(Boolean, nullable=False, default=True)
    start_time = Column(String(5), nullable=True)  # required when not full day
    end_time = Column(String(5), nullable=True)
    reason = Column(String, nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(UTCDateTime(), server_default=func.now())


class WorkingHours(Base):
    """Default weekly schedule (working-hours model)"""
    __tablename__ = "working_hours"

    id = Column(Integer, primary_key=True)
    day_of_week = Column(Integer, nullable=False, unique=True)  # 0=Sunday, 6=Saturday
    start_time = Column(String(5), nullable=False)  # HH:MM format
    end_time = Column(String(5), nullable=False)  # HH:MM format
    is_active = Column(Boolean, nullable=False, default=True)

    def __repr__(self):
        return f"<WorkingHours(day={self.day_of_week}, {self.start_time}-{self.end_time})>"
