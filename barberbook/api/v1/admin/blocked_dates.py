# barberbook/api/v1/admin/blocked_dates.py
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from barberbook.api.dependencies import get_clock
from barberbook.config.database import get_db
from barberbook.schemas.availability import BlockedDateCreate, BlockedDateResponse
from barberbook.services.availability.slot_admin_service import SlotAdminService

router = APIRouter()


@router.get("", response_model=List[BlockedDateResponse])
def list_blocked_dates(db: Session = Depends(get_db), clock=Depends(get_clock)):
    blocked = SlotAdminService.list_blocked_dates(db, clock.now())
    return [SlotAdminService.serialize_blocked_date(row) for row in blocked]


@router.post("", response_model=BlockedDateResponse, status_code=status.HTTP_201_CREATED)
def create_blocked_date(payload: BlockedDateCreate, db: Session = Depends(get_db)):
    blocked = SlotAdminService.create_blocked_date(
        db,
        payload.date,
        is_full_day=payload.is_full_day,
        start_time=payload.start_time,
        end_time=payload.end_time,
        reason=payload.reason
    )
    return SlotAdminService.serialize_blocked_date(blocked)


@router.delete("/{blocked_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blocked_date(
        blocked_id: UUID = Path(..., description="Blocked date ID"),
        db: Session = Depends(get_db)
):
    SlotAdminService.delete_blocked_date(db, blocked_id)
