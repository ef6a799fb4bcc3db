# barberbook/services/sms/templates.py
"""SMS bodies for appointment notifications, rendered in business-local time"""
from datetime import datetime

from barberbook.config.settings import settings
from barberbook.models.sms_log import SMSMessageType
from barberbook.scheduling.timezones import business_tz, to_utc


def format_sms_date(instant: datetime) -> str:
    """Monday, March 3, 2025"""
    local = to_utc(instant).astimezone(business_tz())
    return f"{local:%A, %B} {local.day}, {local.year}"


def format_sms_time(instant: datetime) -> str:
    """9:00 AM"""
    local = to_utc(instant).astimezone(business_tz())
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def confirmation_message(appointment) -> str:
    return (
        f"Hi {appointment.client_name}! Your appointment at {settings.BARBER_NAME} is confirmed "
        f"for {format_sms_date(appointment.start_time)} at {format_sms_time(appointment.start_time)}.\n"
        f"Address: {settings.BARBER_ADDRESS}\n"
        f"Need to reschedule? Call {settings.BARBER_PHONE}"
    )


def one_day_reminder_message(appointment) -> str:
    return (
        f"Reminder: {appointment.client_name}, you have an appointment tomorrow at "
        f"{format_sms_time(appointment.start_time)} at {settings.BARBER_NAME}.\n"
        f"Address: {settings.BARBER_ADDRESS}"
    )


def one_hour_reminder_message(appointment) -> str:
    return (
        f"See you soon, {appointment.client_name}! Your appointment at {settings.BARBER_NAME} "
        f"starts at {format_sms_time(appointment.start_time)}."
    )


def cancellation_message(appointment) -> str:
    return (
        f"Hi {appointment.client_name}, your appointment on {format_sms_date(appointment.start_time)} "
        f"at {format_sms_time(appointment.start_time)} has been cancelled.\n"
        f"Book again anytime: {settings.BOOKING_URL}"
    )


def availability_alert_message() -> str:
    return (
        f"New appointment times just opened up at {settings.BARBER_NAME}! "
        f"Book now: {settings.BOOKING_URL}"
    )


APPOINTMENT_TEMPLATES = {
    SMSMessageType.CONFIRMATION: confirmation_message,
    SMSMessageType.REMINDER_1DAY: one_day_reminder_message,
    SMSMessageType.REMINDER_1HOUR: one_hour_reminder_message,
    SMSMessageType.CANCELLATION: cancellation_message,
}


def render_appointment_message(message_type: str, appointment) -> str:
    try:
        template = APPOINTMENT_TEMPLATES[message_type]
    except KeyError:
        raise ValueError(f"No appointment template for message type {message_type}")
    return template(appointment)
