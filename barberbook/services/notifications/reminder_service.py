# barberbook/services/notifications/reminder_service.py
"""Scheduled SMS jobs: day-before and hour-before reminders, availability alerts"""
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List
import logging

from sqlalchemy.orm import Session

from barberbook.config.settings import settings
from barberbook.core.exceptions import DependencyError
from barberbook.models.appointment import Appointment, AppointmentStatus
from barberbook.models.sms_log import SMSLog, SMSMessageType
from barberbook.scheduling.timezones import business_date, business_day_range, local_midnight
from barberbook.services.sms.templates import availability_alert_message
from barberbook.utils.phone import mask_phone

logger = logging.getLogger(__name__)


class ReminderService:

    @staticmethod
    def already_sent(db: Session, appointment_id, message_type: str) -> bool:
        return db.query(SMSLog.id).filter(
            SMSLog.appointment_id == appointment_id,
            SMSLog.message_type == message_type,
            SMSLog.status == "sent"
        ).first() is not None

    @staticmethod
    def _send_batch(
            db: Session,
            appointments: Iterable[Appointment],
            message_type: str,
            sms_service
    ) -> Dict[str, int]:
        results = {"sent": 0, "skipped": 0, "failed": 0}
        for appointment in appointments:
            if ReminderService.already_sent(db, appointment.id, message_type):
                results["skipped"] += 1
                continue
            try:
                sms_service.send_appointment_message(db, appointment, message_type)
                results["sent"] += 1
            except DependencyError as e:
                logger.error(f"{message_type} failed for appointment {appointment.id}: {e}")
                results["failed"] += 1
        return results

    @staticmethod
    def send_one_day_reminders(db: Session, now: datetime, sms_service) -> Dict[str, int]:
        """Remind every confirmed appointment on the next business day"""
        tomorrow = business_date(now) + timedelta(days=1)
        day_start, day_end = business_day_range(tomorrow)

        appointments = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time >= day_start,
            Appointment.start_time < day_end
        ).order_by(Appointment.start_time.asc()).all()

        results = ReminderService._send_batch(db, appointments, SMSMessageType.REMINDER_1DAY, sms_service)
        logger.info(f"One-day reminders for {tomorrow}: {results}")
        return results

    @staticmethod
    def send_one_hour_reminders(db: Session, now: datetime, sms_service) -> Dict[str, int]:
        """Remind confirmed appointments starting 55-65 minutes from now"""
        window_start = now + timedelta(minutes=settings.REMINDER_WINDOW_START_MINUTES)
        window_end = now + timedelta(minutes=settings.REMINDER_WINDOW_END_MINUTES)

        appointments = db.query(Appointment).filter(
            Appointment.status == AppointmentStatus.CONFIRMED,
            Appointment.start_time >= window_start,
            Appointment.start_time <= window_end
        ).all()

        results = ReminderService._send_batch(db, appointments, SMSMessageType.REMINDER_1HOUR, sms_service)
        if appointments:
            logger.info(f"One-hour reminders: {results}")
        return results

    # ==================== AVAILABILITY ALERT ====================

    @staticmethod
    def eligible_alert_clients(db: Session, now: datetime) -> List[Dict[str, Any]]:
        """
        Recurring clients to tell about newly opened times.

        A recurring client has two or more appointments (any status) in the
        lookback period. Numbers already alerted on the current business day
        are left out. The most recent name on file is used.
        """
        since = now - timedelta(days=settings.AVAILABILITY_ALERT_LOOKBACK_DAYS)
        today_start = local_midnight(business_date(now))

        alerted_today = {
            phone for (phone,) in db.query(SMSLog.phone_number).filter(
                SMSLog.message_type == SMSMessageType.AVAILABILITY_ALERT,
                SMSLog.sent_at >= today_start
            ).all()
        }

        rows = db.query(Appointment.phone_number, Appointment.client_name).filter(
            Appointment.date >= since
        ).order_by(Appointment.date.asc(), Appointment.created_at.asc()).all()

        clients: Dict[str, Dict[str, Any]] = {}
        for phone, name in rows:
            if not phone or not phone.strip():
                continue
            client = clients.setdefault(phone, {"phone_number": phone, "client_name": name, "appointment_count": 0})
            client["appointment_count"] += 1
            client["client_name"] = name

        return [
            client for phone, client in clients.items()
            if client["appointment_count"] >= 2 and phone not in alerted_today
        ]

    @staticmethod
    def preview_alert(db: Session, now: datetime, include_details: bool = False) -> Dict[str, Any]:
        clients = ReminderService.eligible_alert_clients(db, now)
        response: Dict[str, Any] = {"eligible_count": len(clients)}
        if include_details:
            response["clients"] = [
                {"client_name": c["client_name"], "phone_number": mask_phone(c["phone_number"])}
                for c in clients
            ]
        return response

    @staticmethod
    def send_availability_alert(db: Session, now: datetime, sms_service) -> Dict[str, int]:
        """Alert up to AVAILABILITY_ALERT_MAX_CLIENTS eligible clients"""
        clients = ReminderService.eligible_alert_clients(db, now)
        batch = clients[:settings.AVAILABILITY_ALERT_MAX_CLIENTS]
        body = availability_alert_message()

        results = {"sent": 0, "failed": 0, "remaining": len(clients) - len(batch)}
        for client in batch:
            try:
                sms_service.send_sms(
                    db, client["phone_number"], SMSMessageType.AVAILABILITY_ALERT, body
                )
                results["sent"] += 1
            except DependencyError as e:
                logger.error(f"Availability alert to {mask_phone(client['phone_number'])} failed: {e}")
                results["failed"] += 1

        logger.info(f"Availability alert: {results}")
        return results
