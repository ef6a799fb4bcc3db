# barberbook/api/v1/admin/available_slots.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from barberbook.api.dependencies import get_clock
from barberbook.config.database import get_db
from barberbook.schemas.availability import (
    AvailableSlotCreate,
    AvailableSlotResponse,
    BulkDuplicateResponse,
)
from barberbook.services.availability.slot_admin_service import SlotAdminService

router = APIRouter()


@router.get("", response_model=List[AvailableSlotResponse])
def list_available_slots(
        include_past: bool = Query(False, description="Include dates before today"),
        db: Session = Depends(get_db),
        clock=Depends(get_clock)
):
    slots = SlotAdminService.list_available_slots(db, clock.now(), include_past=include_past)
    return [SlotAdminService.serialize_slot(slot) for slot in slots]


@router.post("", response_model=AvailableSlotResponse, status_code=status.HTTP_201_CREATED)
def create_available_slot(payload: AvailableSlotCreate, db: Session = Depends(get_db)):
    slot = SlotAdminService.create_available_slot(
        db, payload.date, payload.start_time, payload.end_time, payload.reason
    )
    return SlotAdminService.serialize_slot(slot)


@router.post("/bulk", response_model=BulkDuplicateResponse)
def duplicate_current_week(db: Session = Depends(get_db), clock=Depends(get_clock)):
    """Copy this week's remaining windows into the next week without slots"""
    return SlotAdminService.duplicate_current_week(db, clock.now())


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_available_slot(
        slot_id: UUID = Path(..., description="Available slot ID"),
        db: Session = Depends(get_db)
):
    SlotAdminService.delete_available_slot(db, slot_id)
