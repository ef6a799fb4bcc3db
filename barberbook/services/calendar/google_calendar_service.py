# barberbook/services/calendar/google_calendar_service.py
"""Mirror of confirmed appointments in the barber's Google Calendar"""
from typing import Dict, Optional
import logging

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from barberbook.config.settings import get_settings
from barberbook.core.exceptions import DependencyError

settings = get_settings()

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"


class GoogleCalendarService:
    SCOPES = ['https://www.googleapis.com/auth/calendar']

    def __init__(self, service=None):
        self._service = service

    @property
    def service(self):
        if self._service is None:
            self._service = build('calendar', 'v3', credentials=self.get_credentials(), cache_discovery=False)
        return self._service

    def get_credentials(self) -> Credentials:
        """Access token from the long-lived refresh token in settings"""
        if not settings.GOOGLE_REFRESH_TOKEN:
            raise DependencyError("google_calendar", "GOOGLE_REFRESH_TOKEN is not set")

        credentials = Credentials(
            token=None,
            refresh_token=settings.GOOGLE_REFRESH_TOKEN,
            token_uri=TOKEN_URI,
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            scopes=self.SCOPES
        )
        try:
            credentials.refresh(Request())
        except GoogleAuthError as e:
            raise DependencyError("google_calendar", f"Token refresh failed: {e}")
        return credentials

    @staticmethod
    def build_event(appointment) -> Dict:
        return {
            'summary': f"Haircut - {appointment.client_name}",
            'description': f"Client: {appointment.client_name}\nPhone: {appointment.phone_number}",
            'location': settings.BARBER_ADDRESS,
            'start': {
                'dateTime': appointment.start_time.isoformat(),
                'timeZone': settings.BUSINESS_TIMEZONE,
            },
            'end': {
                'dateTime': appointment.end_time.isoformat(),
                'timeZone': settings.BUSINESS_TIMEZONE,
            },
            'reminders': {'useDefault': True},
        }

    def create_event(self, appointment) -> str:
        """Insert an event and return its id"""
        try:
            event = self.service.events().insert(
                calendarId=settings.GOOGLE_CALENDAR_ID,
                body=self.build_event(appointment)
            ).execute()
        except HttpError as e:
            raise DependencyError("google_calendar", f"Event creation failed: {e}")

        logger.info(f"Created calendar event {event['id']} for appointment {appointment.id}")
        return event['id']

    def update_event(self, event_id: str, appointment) -> Optional[str]:
        """Patch an event; returns None when the event no longer exists"""
        try:
            event = self.service.events().update(
                calendarId=settings.GOOGLE_CALENDAR_ID,
                eventId=event_id,
                body=self.build_event(appointment)
            ).execute()
        except HttpError as e:
            if e.resp.status in (404, 410):
                logger.warning(f"Calendar event {event_id} is gone, cannot update")
                return None
            raise DependencyError("google_calendar", f"Event update failed: {e}")
        return event['id']

    def delete_event(self, event_id: str) -> None:
        """Delete an event; an already-deleted event counts as success"""
        try:
            self.service.events().delete(
                calendarId=settings.GOOGLE_CALENDAR_ID,
                eventId=event_id
            ).execute()
        except HttpError as e:
            if e.resp.status in (404, 410):
                logger.info(f"Calendar event {event_id} already deleted")
                return
            raise DependencyError("google_calendar", f"Event deletion failed: {e}")

        logger.info(f"Deleted calendar event {event_id}")
