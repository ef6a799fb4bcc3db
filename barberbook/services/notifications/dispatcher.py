# barberbook/services/notifications/dispatcher.py
"""
Post-commit side effects of booking operations.

Each effect is queued as a Celery task; a broker failure is logged and
swallowed so the committed booking still succeeds.
"""
import logging
from typing import Optional

from barberbook.models.sms_log import SMSMessageType

logger = logging.getLogger(__name__)


class NotificationDispatcher:

    def appointment_booked(self, appointment) -> None:
        from barberbook.tasks.calendar_tasks import sync_appointment_to_calendar
        from barberbook.tasks.sms_tasks import send_appointment_sms

        appointment_id = str(appointment.id)
        self._dispatch(send_appointment_sms, appointment_id, SMSMessageType.CONFIRMATION)
        self._dispatch(sync_appointment_to_calendar, appointment_id)

    def appointment_rescheduled(self, appointment, previous_event_id: Optional[str]) -> None:
        from barberbook.tasks.calendar_tasks import replace_calendar_event
        from barberbook.tasks.sms_tasks import send_appointment_sms

        appointment_id = str(appointment.id)
        self._dispatch(replace_calendar_event, appointment_id, previous_event_id)
        self._dispatch(send_appointment_sms, appointment_id, SMSMessageType.CONFIRMATION)

    def appointment_cancelled(self, appointment) -> None:
        from barberbook.tasks.calendar_tasks import delete_calendar_event
        from barberbook.tasks.sms_tasks import send_appointment_sms

        appointment_id = str(appointment.id)
        self._dispatch(send_appointment_sms, appointment_id, SMSMessageType.CANCELLATION)
        if appointment.google_event_id:
            self._dispatch(delete_calendar_event, appointment_id, appointment.google_event_id)

    @staticmethod
    def _dispatch(task, *args) -> None:
        try:
            task.delay(*args)
        except Exception as e:
            logger.error(f"Failed to queue {task.name} for appointment {args[0]}: {str(e)}")


notification_dispatcher = NotificationDispatcher()


def get_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher
