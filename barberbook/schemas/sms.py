# barberbook/schemas/sms.py
"""Admin SMS sends and inbound Twilio webhooks"""
from typing import Literal, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from barberbook.utils.phone import normalize_phone_number

ManualMessageType = Literal[
    "confirmation",
    "reminder_1day",
    "reminder_1hour",
    "cancellation",
    "availability_alert",
    "manual",
]


class ManualSMSCreate(BaseModel):
    """
    One-off SMS from the dashboard.

    Appointment templates need `appointment_id`; `manual` needs `body`.
    A given body always wins over the template.
    """
    message_type: ManualMessageType
    phone_number: Optional[str] = Field(None, description="Defaults to the appointment's phone")
    appointment_id: Optional[UUID] = None
    body: Optional[str] = Field(None, min_length=1, max_length=480)

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: Optional[str]) -> Optional[str]:
        return normalize_phone_number(v) if v is not None else None


class TwilioSMSWebhook(BaseModel):
    """Twilio incoming SMS webhook payload (form fields we use)"""
    MessageSid: str = Field(..., description="Unique message identifier")
    From: str = Field(..., description="Sender phone number")
    To: Optional[str] = Field(None, description="Our Twilio number")
    Body: str = Field("", description="SMS message content")
