# barberbook/services/appointment/appointment_query_service.py
"""Read-only appointment queries for the admin dashboard and client lookup"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from barberbook.models.appointment import Appointment, AppointmentStatus
from barberbook.models.sms_log import SMSLog
from barberbook.scheduling.timezones import business_date, business_day_range, parse_date_key
from barberbook.schemas.appointment import AppointmentResponse


class AppointmentQueryService:

    @staticmethod
    def list_appointments(
            db: Session,
            status: Optional[str] = None,
            date_str: Optional[str] = None,
            phone_number: Optional[str] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        """Paginated appointments, oldest first, with filters"""
        query = db.query(Appointment)

        if status:
            query = query.filter(Appointment.status == status)
        if date_str:
            day_start, day_end = business_day_range(parse_date_key(date_str))
            query = query.filter(Appointment.start_time >= day_start, Appointment.start_time < day_end)
        if phone_number:
            query = query.filter(Appointment.phone_number == phone_number)

        query = query.order_by(Appointment.start_time.asc())
        total = query.count()
        appointments = query.offset(skip).limit(limit).all()

        return {
            "total": total,
            "page": {
                "skip": skip,
                "limit": limit,
                "total_pages": (total + limit - 1) // limit if total > 0 else 0
            },
            "filters": {
                "status": status,
                "date": date_str,
                "phone_number": phone_number,
            },
            "appointments": [
                AppointmentResponse.from_appointment(appointment).model_dump(mode="json")
                for appointment in appointments
            ]
        }

    @staticmethod
    def upcoming_for_phone(db: Session, phone_number: str, now: datetime) -> List[Appointment]:
        """Confirmed appointments of one client that have not started yet"""
        return db.query(Appointment).filter(
            Appointment.phone_number == phone_number,
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time > now
        ).order_by(Appointment.start_time.asc()).all()

    @staticmethod
    def get_stats(db: Session, now: datetime) -> Dict[str, Any]:
        """Counts by status, today's confirmed count and upcoming total"""
        counts = dict(
            db.query(Appointment.status, func.count(Appointment.id))
            .group_by(Appointment.status)
            .all()
        )
        day_start, day_end = business_day_range(business_date(now))

        today = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time >= day_start,
            Appointment.start_time < day_end
        ).count()
        upcoming = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time >= now
        ).count()

        return {
            "total": sum(counts.values()),
            "by_status": {status: counts.get(status, 0) for status in AppointmentStatus.ALL},
            "today": today,
            "upcoming": upcoming,
        }

    @staticmethod
    def list_sms_logs(
            db: Session,
            message_type: Optional[str] = None,
            status: Optional[str] = None,
            skip: int = 0,
            limit: int = 50
    ) -> Dict[str, Any]:
        query = db.query(SMSLog)
        if message_type:
            query = query.filter(SMSLog.message_type == message_type)
        if status:
            query = query.filter(SMSLog.status == status)

        total = query.count()
        logs = query.order_by(SMSLog.sent_at.desc()).offset(skip).limit(limit).all()

        return {
            "total": total,
            "logs": [AppointmentQueryService.serialize_sms_log(log) for log in logs]
        }

    @staticmethod
    def serialize_sms_log(log: SMSLog) -> Dict[str, Any]:
        return {
            "id": str(log.id),
            "appointment_id": str(log.appointment_id) if log.appointment_id else None,
            "phone_number": log.phone_number,
            "message_type": log.message_type,
            "status": log.status,
            "twilio_sid": log.twilio_sid,
            "error_message": log.error_message,
            "sent_at": log.sent_at.isoformat() if log.sent_at else None,
        }
