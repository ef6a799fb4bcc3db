# barberbook/services/sms/manual_sms_service.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from barberbook.core.exceptions import ValidationError
from barberbook.models.sms_log import SMSLog, SMSMessageType
from barberbook.services.appointment.booking_service import BookingService
from barberbook.services.sms.templates import APPOINTMENT_TEMPLATES, availability_alert_message
from barberbook.utils.phone import mask_phone

logger = logging.getLogger(__name__)


class ManualSMSService:
    """Admin-initiated sends, logged in sms_logs like every other message"""

    @staticmethod
    def send(
            db: Session,
            sms_service,
            message_type: str,
            phone_number: Optional[str] = None,
            appointment_id: Optional[UUID] = None,
            body: Optional[str] = None
    ) -> SMSLog:
        """
        Compose and send one message.

        Raises:
            AppointmentNotFoundError: unknown appointment_id
            ValidationError: nothing to render or nobody to send to
            DependencyError: Twilio failed (a failed log row is written)
        """
        appointment = BookingService.get_appointment(db, appointment_id) if appointment_id else None

        to_phone = phone_number or (appointment.phone_number if appointment else None)
        if not to_phone:
            raise ValidationError("phone_number or appointment_id is required")

        if not body:
            if message_type in APPOINTMENT_TEMPLATES:
                if appointment is None:
                    raise ValidationError(f"appointment_id is required for {message_type} messages")
                body = APPOINTMENT_TEMPLATES[message_type](appointment)
            elif message_type == SMSMessageType.AVAILABILITY_ALERT:
                body = availability_alert_message()
            else:
                raise ValidationError("Message body is required")

        logger.info(f"Manual {message_type} SMS to {mask_phone(to_phone)}")
        return sms_service.send_sms(
            db, to_phone, message_type, body, appointment.id if appointment else None
        )
