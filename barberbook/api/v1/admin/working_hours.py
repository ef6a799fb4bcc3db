# barberbook/api/v1/admin/working_hours.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from barberbook.config.database import get_db
from barberbook.schemas.availability import WorkingHoursUpdate
from barberbook.services.availability.slot_admin_service import SlotAdminService

router = APIRouter()


@router.get("")
def get_working_hours(db: Session = Depends(get_db)):
    """Weekly template, all seven days (0=Sunday)"""
    return {"days": SlotAdminService.get_working_hours(db)}


@router.put("")
def update_working_hours(payload: WorkingHoursUpdate, db: Session = Depends(get_db)):
    days = SlotAdminService.update_working_hours(db, [day.model_dump() for day in payload.days])
    return {"success": True, "days": days}
