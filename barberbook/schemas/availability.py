# barberbook/schemas/availability.py
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from barberbook.schemas.appointment import DATE_PATTERN, TIME_PATTERN


class AvailabilityResponse(BaseModel):
    """Bookable start times for one business date"""
    date: str = Field(..., description="Requested date YYYY-MM-DD")
    available: bool = Field(..., description="Whether any slot can be booked")
    slots: List[str] = Field(default_factory=list, description="HH:MM start times, ascending")
    reason: Optional[str] = Field(None, description="Why the whole date is closed")
    appointment_duration: int = Field(..., description="Minutes")
    buffer_time: int = Field(..., description="Minutes")


class AvailableDatesResponse(BaseModel):
    dates: List[str] = Field(default_factory=list)


class AvailableSlotCreate(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    reason: Optional[str] = Field(None, max_length=200)

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, v: str, info) -> str:
        start_time = info.data.get("start_time")
        if start_time and v <= start_time:
            raise ValueError("End time must be after start time")
        return v


class AvailableSlotResponse(BaseModel):
    id: str
    date: str
    start_time: str
    end_time: str
    reason: Optional[str] = None


class BulkDuplicateResponse(BaseModel):
    success: bool
    created: int = 0
    target_week_start: Optional[str] = None
    message: str


class BlockedDateCreate(BaseModel):
    date: str = Field(..., pattern=DATE_PATTERN)
    is_full_day: bool = Field(True)
    start_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    end_time: Optional[str] = Field(None, pattern=TIME_PATTERN)
    reason: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def check_partial_block(self):
        if self.is_full_day:
            return self
        if not self.start_time or not self.end_time:
            raise ValueError("Partial-day blocks need start_time and end_time")
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class BlockedDateResponse(BaseModel):
    id: str
    date: str
    is_full_day: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None


class PublicBlockedDate(BaseModel):
    """Closure as shown to clients; the admin's reason stays private"""
    date: str
    is_full_day: bool
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class WorkingHoursDay(BaseModel):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday, 6=Saturday")
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)
    is_active: bool = Field(True)

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, v: str, info) -> str:
        start_time = info.data.get("start_time")
        if start_time and v <= start_time:
            raise ValueError("End time must be after start time")
        return v


class WorkingHoursUpdate(BaseModel):
    days: List[WorkingHoursDay] = Field(..., min_length=1, max_length=7)
