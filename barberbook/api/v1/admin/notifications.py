# barberbook/api/v1/admin/notifications.py
"""Calendar sync trigger, availability alerts, manual SMS and the SMS log"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from barberbook.api.dependencies import get_clock, get_sms_service
from barberbook.config.database import get_db
from barberbook.schemas.sms import ManualSMSCreate
from barberbook.services.appointment.appointment_query_service import AppointmentQueryService
from barberbook.services.notifications.reminder_service import ReminderService
from barberbook.services.sms.manual_sms_service import ManualSMSService

logger = logging.getLogger(__name__)

router = APIRouter()


def _enqueue(task):
    try:
        result = task.delay()
    except Exception as e:
        logger.error(f"Failed to queue {task.name}: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Background worker is unavailable"
        )
    return {"queued": True, "task_id": result.id}


@router.post("/calendar/sync", status_code=status.HTTP_202_ACCEPTED)
def sync_calendar():
    """Queue a full calendar reconciliation"""
    from barberbook.tasks.calendar_tasks import reconcile_calendar

    return _enqueue(reconcile_calendar)


@router.get("/availability-alert")
def preview_availability_alert(
        include_details: bool = Query(False, description="List eligible clients with masked phones"),
        db: Session = Depends(get_db),
        clock=Depends(get_clock)
):
    return ReminderService.preview_alert(db, clock.now(), include_details=include_details)


@router.post("/availability-alert", status_code=status.HTTP_202_ACCEPTED)
def send_availability_alert():
    """Queue SMS alerts to recurring clients about newly opened times"""
    from barberbook.tasks.sms_tasks import send_availability_alert as send_alert_task

    return _enqueue(send_alert_task)


@router.get("/sms-logs")
def list_sms_logs(
        message_type: Optional[str] = Query(None),
        status_filter: Optional[str] = Query(None, alias="status", pattern="^(sent|failed)$"),
        skip: int = Query(0, ge=0),
        limit: int = Query(50, ge=1, le=200),
        db: Session = Depends(get_db)
):
    return AppointmentQueryService.list_sms_logs(
        db, message_type=message_type, status=status_filter, skip=skip, limit=limit
    )


@router.post("/sms", status_code=status.HTTP_201_CREATED)
def send_manual_sms(
        payload: ManualSMSCreate,
        db: Session = Depends(get_db),
        sms_service=Depends(get_sms_service)
):
    """Send one SMS now; Twilio failures come back as 502 and are still logged"""
    log = ManualSMSService.send(
        db,
        sms_service,
        payload.message_type,
        phone_number=payload.phone_number,
        appointment_id=payload.appointment_id,
        body=payload.body
    )
    return {"success": True, "sms_log": AppointmentQueryService.serialize_sms_log(log)}
