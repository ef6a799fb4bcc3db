# barberbook/schemas/appointment.py
import re
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from barberbook.scheduling.timezones import business_date_key, format_instant_wall_clock
from barberbook.utils.phone import normalize_phone_number

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
TIME_PATTERN = r"^\d{2}:\d{2}$"


class AppointmentCreate(BaseModel):
    """Public booking request"""
    client_name: str = Field(..., min_length=2, max_length=50, description="Client full name")
    phone_number: str = Field(..., description="US phone number, any common format")
    date: str = Field(..., pattern=DATE_PATTERN, description="Business-local date YYYY-MM-DD")
    time: str = Field(..., pattern=TIME_PATTERN, description="Business-local start time HH:MM")

    @field_validator("client_name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        if not NAME_PATTERN.match(v):
            raise ValueError("Name can only contain letters and spaces")
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        return normalize_phone_number(v)


class AppointmentReschedule(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN, description="New business-local date")
    time: str = Field(..., pattern=TIME_PATTERN, description="New business-local start time")


class AppointmentStatusUpdate(BaseModel):
    status: Literal["completed", "cancelled"]


class AppointmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    client_name: str
    phone_number: str
    date: datetime
    start_time: datetime
    end_time: datetime
    status: str
    google_event_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # Business-local rendering of start_time
    local_date: Optional[str] = None
    local_time: Optional[str] = None

    @classmethod
    def from_appointment(cls, appointment) -> "AppointmentResponse":
        response = cls.model_validate(appointment)
        response.local_date = business_date_key(appointment.start_time)
        response.local_time = format_instant_wall_clock(appointment.start_time)
        return response
