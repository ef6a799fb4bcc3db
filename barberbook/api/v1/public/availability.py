# barberbook/api/v1/public/availability.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from barberbook.api.dependencies import get_clock
from barberbook.config.database import get_db
from barberbook.scheduling.timezones import business_date_key
from barberbook.schemas.availability import AvailabilityResponse, AvailableDatesResponse, PublicBlockedDate
from barberbook.services.availability.availability_service import AvailabilityService
from barberbook.services.availability.slot_admin_service import SlotAdminService

router = APIRouter()


@router.get("/availability", response_model=AvailabilityResponse)
def get_availability(
        date: str = Query(..., description="Business-local date YYYY-MM-DD"),
        db: Session = Depends(get_db),
        clock=Depends(get_clock)
):
    """Bookable start times for a date, or the reason it is closed"""
    return AvailabilityService.get_availability(db, date, clock.now())


@router.get("/available-dates", response_model=AvailableDatesResponse)
def get_available_dates(db: Session = Depends(get_db), clock=Depends(get_clock)):
    """Dates from today through the booking horizon with open windows"""
    return {"dates": AvailabilityService.available_dates(db, clock.now())}


@router.get("/availability/blocked-dates", response_model=List[PublicBlockedDate])
def get_blocked_dates(db: Session = Depends(get_db), clock=Depends(get_clock)):
    """Closures from today on, for greying out the booking calendar"""
    return [
        {
            "date": business_date_key(blocked.date),
            "is_full_day": blocked.is_full_day,
            "start_time": blocked.start_time,
            "end_time": blocked.end_time,
        }
        for blocked in SlotAdminService.list_blocked_dates(db, clock.now())
    ]
