# barberbook/webhooks/sms_handler.py
"""Inbound SMS webhook: STOP/START keywords and replies from clients"""
import logging

from fastapi import APIRouter, Request, Response
from twilio.twiml.messaging_response import MessagingResponse

from barberbook.schemas.sms import TwilioSMSWebhook
from barberbook.services.sms.inbound_service import InboundSMSService

router = APIRouter()
logger = logging.getLogger(__name__)


def empty_twiml() -> Response:
    """No auto-reply; Twilio answers STOP/START itself"""
    return Response(content=str(MessagingResponse()), media_type="application/xml")


@router.post("/incoming")
async def handle_incoming_sms(request: Request):
    try:
        form_data = await request.form()
        webhook_data = TwilioSMSWebhook(**form_data)
        InboundSMSService.handle(webhook_data.From, webhook_data.Body, webhook_data.MessageSid)
    except Exception as e:
        # Twilio retries non-2xx responses, so errors still get empty TwiML
        logger.error(f"Error handling SMS webhook: {str(e)}")

    return empty_twiml()
