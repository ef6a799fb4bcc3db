# barberbook/services/sms/inbound_service.py
"""
Inbound SMS handling.

Twilio enforces STOP/START itself at the messaging-service level, so
keywords are only classified and logged here. Nothing is persisted and
no auto-reply is sent.
"""
import logging

from barberbook.utils.phone import mask_phone

logger = logging.getLogger(__name__)

OPT_OUT = "opt-out"
OPT_IN = "opt-in"
RECEIVED = "received"

OPT_OUT_KEYWORDS = frozenset({"STOP", "UNSUBSCRIBE", "END", "QUIT"})
OPT_IN_KEYWORDS = frozenset({"START", "SUBSCRIBE", "YES"})


def classify_inbound_sms(body: str) -> str:
    keyword = (body or "").strip().upper()
    if keyword in OPT_OUT_KEYWORDS:
        return OPT_OUT
    if keyword in OPT_IN_KEYWORDS:
        return OPT_IN
    return RECEIVED


class InboundSMSService:

    @staticmethod
    def handle(from_phone: str, body: str, message_sid: str) -> str:
        kind = classify_inbound_sms(body)
        if kind == OPT_OUT:
            logger.info(f"{mask_phone(from_phone)} opted out of SMS ({message_sid})")
        elif kind == OPT_IN:
            logger.info(f"{mask_phone(from_phone)} opted back in to SMS ({message_sid})")
        else:
            logger.info(f"Inbound SMS {message_sid} from {mask_phone(from_phone)}: {len(body or '')} chars")
        return kind
