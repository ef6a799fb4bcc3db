# barberbook/webhooks/router.py
from fastapi import APIRouter

from barberbook.webhooks import sms_handler

webhook_router = APIRouter()
webhook_router.include_router(sms_handler.router, prefix="/sms")


@webhook_router.get("/")
async def webhook_info():
    return {
        "endpoints": {
            "sms_messages": "/webhooks/sms/incoming",
        },
        "note": "Configure as the inbound message URL of the Twilio messaging service"
    }
