# barberbook/services/sms/sms_service.py
"""SMS sending through Twilio, every attempt recorded in sms_logs"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from barberbook.config.settings import get_settings
from barberbook.core.exceptions import DependencyError
from barberbook.models.sms_log import SMSLog
from barberbook.services.sms.templates import render_appointment_message
from barberbook.utils.phone import mask_phone

logger = logging.getLogger(__name__)
settings = get_settings()


class SMSService:
    def __init__(self, client: Optional[Client] = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            if not settings.TWILIO_ACCOUNT_SID or not settings.TWILIO_AUTH_TOKEN:
                raise DependencyError("twilio", "Twilio credentials are not configured")
            self._client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        return self._client

    def send_sms(
            self,
            db: Session,
            to_phone: str,
            message_type: str,
            body: str,
            appointment_id: Optional[UUID] = None
    ) -> SMSLog:
        """
        Send one SMS and log it.

        Raises:
            DependencyError: Twilio rejected the message (a failed log row is
                still written)
        """
        try:
            twilio_message = self.client.messages.create(
                body=body,
                messaging_service_sid=settings.TWILIO_MESSAGING_SERVICE_SID,
                to=to_phone
            )
        except (TwilioException, DependencyError) as e:
            error = e.message if isinstance(e, DependencyError) else str(e)
            logger.error(f"Twilio error sending {message_type} to {mask_phone(to_phone)}: {error}")
            self._log(db, to_phone, message_type, "failed", appointment_id, error_message=error)
            raise DependencyError("twilio", error)

        log = self._log(db, to_phone, message_type, "sent", appointment_id, twilio_sid=twilio_message.sid)
        logger.info(f"SMS {message_type} sent to {mask_phone(to_phone)}: {twilio_message.sid}")
        return log

    def send_appointment_message(self, db: Session, appointment, message_type: str) -> SMSLog:
        body = render_appointment_message(message_type, appointment)
        return self.send_sms(db, appointment.phone_number, message_type, body, appointment.id)

    @staticmethod
    def _log(
            db: Session,
            to_phone: str,
            message_type: str,
            status: str,
            appointment_id: Optional[UUID],
            twilio_sid: Optional[str] = None,
            error_message: Optional[str] = None
    ) -> SMSLog:
        log = SMSLog(
            appointment_id=appointment_id,
            phone_number=to_phone,
            message_type=message_type,
            status=status,
            twilio_sid=twilio_sid,
            error_message=error_message
        )
        db.add(log)
        db.commit()
        db.refresh(log)
        return log
