# barberbook/services/availability/slot_admin_service.py
"""Admin management of the availability configuration"""
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.orm import Session

from barberbook.core.exceptions import NotFoundError, ValidationError
from barberbook.models.availability import AvailableSlot, BlockedDate, WorkingHours
from barberbook.scheduling.timezones import (
    business_date,
    business_date_key,
    local_midnight,
    parse_date_key,
    parse_wall_clock,
)
from barberbook.scheduling.windows import sunday_based_weekday

logger = logging.getLogger(__name__)

MAX_WEEKS_TO_SEARCH = 52

DEFAULT_START_TIME = "09:00"
DEFAULT_END_TIME = "18:00"


def _check_time_range(start_time: str, end_time: str) -> None:
    if parse_wall_clock(start_time) >= parse_wall_clock(end_time):
        raise ValidationError("End time must be after start time")


def week_start(day: date) -> date:
    """Sunday starting the week that contains `day`"""
    return day - timedelta(days=sunday_based_weekday(day))


class SlotAdminService:

    # ==================== AVAILABLE SLOTS ====================

    @staticmethod
    def serialize_slot(slot: AvailableSlot) -> Dict[str, Any]:
        return {
            "id": str(slot.id),
            "date": business_date_key(slot.date),
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "reason": slot.reason,
        }

    @staticmethod
    def list_available_slots(db: Session, now: datetime, include_past: bool = False) -> List[AvailableSlot]:
        query = db.query(AvailableSlot)
        if not include_past:
            query = query.filter(AvailableSlot.date >= local_midnight(business_date(now)))
        return query.order_by(AvailableSlot.date.asc(), AvailableSlot.start_time.asc()).all()

    @staticmethod
    def create_available_slot(
            db: Session,
            date_str: str,
            start_time: str,
            end_time: str,
            reason: Optional[str] = None
    ) -> AvailableSlot:
        target_date = parse_date_key(date_str)
        _check_time_range(start_time, end_time)

        slot = AvailableSlot(
            date=local_midnight(target_date),
            start_time=start_time,
            end_time=end_time,
            reason=reason
        )
        db.add(slot)
        db.commit()
        db.refresh(slot)
        logger.info(f"Added available slot {date_str} {start_time}-{end_time}")
        return slot

    @staticmethod
    def delete_available_slot(db: Session, slot_id: UUID) -> None:
        slot = db.query(AvailableSlot).filter(AvailableSlot.id == slot_id).first()
        if not slot:
            raise NotFoundError("Available slot not found")
        db.delete(slot)
        db.commit()

    @staticmethod
    def duplicate_current_week(db: Session, now: datetime) -> Dict[str, Any]:
        """
        Copy the remaining windows of the current week into the next empty week.

        The pattern is built per weekday from today's and later days of the
        current (Sunday-based) week, without duplicate windows. The target is
        the first following week holding no slot rows, searched up to a year
        ahead. Days in the target week that already have rows are skipped.
        """
        today = business_date(now)
        current_week = week_start(today)

        remaining = db.query(AvailableSlot).filter(
            AvailableSlot.date >= local_midnight(today),
            AvailableSlot.date < local_midnight(current_week + timedelta(days=7))
        ).order_by(AvailableSlot.date.asc(), AvailableSlot.start_time.asc()).all()

        if not remaining:
            raise ValidationError(
                "No remaining slots found in the current week. Add slots for upcoming days first."
            )

        pattern: Dict[int, List[Tuple[str, str, Optional[str]]]] = {}
        for slot in remaining:
            weekday = sunday_based_weekday(business_date(slot.date))
            window = (slot.start_time, slot.end_time, slot.reason)
            windows = pattern.setdefault(weekday, [])
            if window not in windows:
                windows.append(window)

        target_week = SlotAdminService._first_empty_week(db, current_week + timedelta(days=7))
        if target_week is None:
            raise ValidationError("All weeks for the next year already have slots. No more weeks available.")

        existing_days = {
            business_date(slot.date) for slot in db.query(AvailableSlot).filter(
                AvailableSlot.date >= local_midnight(target_week),
                AvailableSlot.date < local_midnight(target_week + timedelta(days=7))
            ).all()
        }

        created = 0
        for offset in range(7):
            day = target_week + timedelta(days=offset)
            if day in existing_days:
                continue
            for start_time, end_time, reason in pattern.get(sunday_based_weekday(day), []):
                db.add(AvailableSlot(
                    date=local_midnight(day),
                    start_time=start_time,
                    end_time=end_time,
                    reason=reason
                ))
                created += 1
        db.commit()

        logger.info(f"Duplicated current week into {target_week}: {created} slots")
        if not created:
            return {
                "success": True,
                "created": 0,
                "target_week_start": target_week.isoformat(),
                "message": "No new slots to create. All days in target week already have slots.",
            }
        return {
            "success": True,
            "created": created,
            "target_week_start": target_week.isoformat(),
            "message": f"Created {created} slots for the week of {target_week.isoformat()}",
        }

    @staticmethod
    def _first_empty_week(db: Session, first_week: date) -> Optional[date]:
        for index in range(MAX_WEEKS_TO_SEARCH):
            start = first_week + timedelta(days=7 * index)
            count = db.query(AvailableSlot).filter(
                AvailableSlot.date >= local_midnight(start),
                AvailableSlot.date < local_midnight(start + timedelta(days=7))
            ).count()
            if count == 0:
                return start
        return None

    # ==================== BLOCKED DATES ====================

    @staticmethod
    def serialize_blocked_date(blocked: BlockedDate) -> Dict[str, Any]:
        return {
            "id": str(blocked.id),
            "date": business_date_key(blocked.date),
            "is_full_day": blocked.is_full_day,
            "start_time": blocked.start_time,
            "end_time": blocked.end_time,
            "reason": blocked.reason,
        }

    @staticmethod
    def list_blocked_dates(db: Session, now: datetime) -> List[BlockedDate]:
        return db.query(BlockedDate).filter(
            BlockedDate.date >= local_midnight(business_date(now))
        ).order_by(BlockedDate.date.asc()).all()

    @staticmethod
    def create_blocked_date(
            db: Session,
            date_str: str,
            is_full_day: bool = True,
            start_time: Optional[str] = None,
            end_time: Optional[str] = None,
            reason: Optional[str] = None
    ) -> BlockedDate:
        target_date = parse_date_key(date_str)

        if is_full_day:
            start_time = end_time = None
        else:
            if not start_time or not end_time:
                raise ValidationError("Partial-day blocks need start_time and end_time")
            _check_time_range(start_time, end_time)

        blocked = BlockedDate(
            date=local_midnight(target_date),
            is_full_day=is_full_day,
            start_time=start_time,
            end_time=end_time,
            reason=reason
        )
        db.add(blocked)
        db.commit()
        db.refresh(blocked)
        return blocked

    @staticmethod
    def delete_blocked_date(db: Session, blocked_id: UUID) -> None:
        blocked = db.query(BlockedDate).filter(BlockedDate.id == blocked_id).first()
        if not blocked:
            raise NotFoundError("Blocked date not found")
        db.delete(blocked)
        db.commit()

    # ==================== WORKING HOURS ====================

    @staticmethod
    def get_working_hours(db: Session) -> List[Dict[str, Any]]:
        """All seven days; days never saved show the defaults with id None"""
        saved = {row.day_of_week: row for row in db.query(WorkingHours).all()}
        days = []
        for day_of_week in range(7):
            row = saved.get(day_of_week)
            if row:
                days.append({
                    "id": row.id,
                    "day_of_week": row.day_of_week,
                    "start_time": row.start_time,
                    "end_time": row.end_time,
                    "is_active": row.is_active,
                })
            else:
                days.append({
                    "id": None,
                    "day_of_week": day_of_week,
                    "start_time": DEFAULT_START_TIME,
                    "end_time": DEFAULT_END_TIME,
                    "is_active": 1 <= day_of_week <= 5,
                })
        return days

    @staticmethod
    def update_working_hours(db: Session, days: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        for day in days:
            _check_time_range(day["start_time"], day["end_time"])
            row = db.query(WorkingHours).filter_by(day_of_week=day["day_of_week"]).first()
            if row is None:
                row = WorkingHours(day_of_week=day["day_of_week"])
                db.add(row)
            row.start_time = day["start_time"]
            row.end_time = day["end_time"]
            row.is_active = day.get("is_active", True)
        db.commit()
        return SlotAdminService.get_working_hours(db)
