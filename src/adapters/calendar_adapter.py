"""Google Calendar adapter for a signed-in user's primary calendar.

Authenticates with the user's OAuth access token (from the session cookie
or a stored connection) and flattens API events into the shape the
calendar views and preparation page consume.
"""

import asyncio
from datetime import datetime
from typing import Any

import structlog
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = structlog.get_logger()

PRIMARY_CALENDAR = "primary"
PRIMARY_CALENDAR_COLOR = "#4285F4"
PRIMARY_CALENDAR_SUMMARY = "Primary Calendar"

CALENDAR_SCOPES = [
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events.readonly",
    "https://www.googleapis.com/auth/contacts.readonly",
]

# Title keywords -> display event type, checked in order
_TITLE_EVENT_TYPES: list[tuple[str, tuple[str, ...]]] = [
    ("Meeting", ("meeting", "sync", "standup")),
    ("Birthday", ("birthday", "bday", "born")),
    ("Interview", ("interview", "screening")),
    ("Social", ("party", "dinner", "lunch")),
]


class CalendarAuthError(Exception):
    """Raised when the access token is missing, invalid or expired."""

    pass


class CalendarAPIError(Exception):
    """Raised when the Calendar API call fails for any other reason."""

    pass


class EventFormatError(ValueError):
    """Raised when an API event lacks usable start/end information."""

    pass


def determine_event_type(event: dict[str, Any]) -> str:
    """Guess a display event type from the event title."""
    title = (event.get("summary") or "").lower()
    for event_type, keywords in _TITLE_EVENT_TYPES:
        if any(keyword in title for keyword in keywords):
            return event_type
    return "Default"


def _source(event: dict[str, Any]) -> str:
    source = event.get("source")
    if isinstance(source, dict):
        return source.get("url") or PRIMARY_CALENDAR
    return source or PRIMARY_CALENDAR


def format_event(event: dict[str, Any]) -> dict[str, Any]:
    """Flatten a Calendar API event.

    All-day events keep their ``YYYY-MM-DD`` strings (end exclusive, as the
    API returns it); timed events keep their RFC 3339 strings with offset.

    Args:
        event: Raw event resource from the Calendar API

    Returns:
        Flattened event dict with camelCase keys

    Raises:
        EventFormatError: If start or end information is missing
    """
    start = event.get("start") or {}
    end = event.get("end") or {}
    if not start.get("date") and not start.get("dateTime"):
        raise EventFormatError("Invalid event data: missing start date/time")

    is_all_day = bool(start.get("date"))
    if is_all_day:
        start_value, end_value = start["date"], end.get("date")
    else:
        if not end.get("dateTime"):
            raise EventFormatError("Invalid timed event: missing dateTime")
        start_value, end_value = start["dateTime"], end["dateTime"]

    return {
        "id": event.get("id"),
        "title": event.get("summary") or "Untitled Event",
        "description": event.get("description") or "",
        "location": event.get("location") or "",
        "start": start_value,
        "end": end_value,
        "isAllDay": is_all_day,
        "timeZone": start.get("timeZone") or end.get("timeZone"),
        "attendees": [
            a.get("email") for a in event.get("attendees", []) if a.get("email")
        ],
        "eventType": determine_event_type(event),
        "source": _source(event),
        "calendarColor": PRIMARY_CALENDAR_COLOR,
        "calendarSummary": PRIMARY_CALENDAR_SUMMARY,
    }


def _rfc3339(value: datetime) -> str:
    return value.isoformat() + ("Z" if value.tzinfo is None else "")


class GoogleCalendarAdapter:
    """Adapter for the user's primary Google Calendar.

    All googleapiclient calls are blocking and run in a worker thread.
    """

    def __init__(self, access_token: str | None, service: Any = None):
        """Initialize with a user access token.

        Args:
            access_token: OAuth access token for the Calendar API
            service: Optional prebuilt Calendar service (for testing)
        """
        self._access_token = access_token
        self._service = service

    def _get_service(self):
        """Get or create Calendar API service."""
        if self._service is None:
            if not self._access_token:
                raise CalendarAuthError("Invalid or expired token")
            creds = Credentials(token=self._access_token)
            self._service = build(
                "calendar", "v3", credentials=creds, cache_discovery=False
            )
        return self._service

    async def _run(self, operation: str, request_factory) -> Any:
        """Execute a Calendar API request off the event loop.

        Raises:
            CalendarAuthError: On 401/403 responses or a missing token
            CalendarAPIError: On any other failure
        """
        service = self._get_service()
        try:
            return await asyncio.to_thread(lambda: request_factory(service).execute())
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.warning(
                "calendar api error", operation=operation, status=status, error=str(e)
            )
            if status in (401, 403):
                raise CalendarAuthError("Invalid or expired token") from e
            raise CalendarAPIError(f"Failed to {operation}: {e}") from e
        except Exception as e:
            logger.warning("calendar request failed", operation=operation, error=str(e))
            raise CalendarAPIError(f"Failed to {operation}: {e}") from e

    async def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        max_results: int = 250,
    ) -> list[dict[str, Any]]:
        """List events in a time window, flattened.

        Events that cannot be formatted are skipped with a warning.

        Args:
            time_min: Start of the window
            time_max: End of the window
            max_results: Page size requested from the API

        Returns:
            Flattened events ordered by start time
        """
        result = await self._run(
            "fetch events",
            lambda service: service.events().list(
                calendarId=PRIMARY_CALENDAR,
                timeMin=_rfc3339(time_min),
                timeMax=_rfc3339(time_max),
                maxResults=max_results,
                singleEvents=True,
                orderBy="startTime",
            ),
        )

        events = []
        for item in result.get("items", []):
            try:
                events.append(format_event(item))
            except EventFormatError as e:
                logger.warning("skipping calendar event", event_id=item.get("id"), error=str(e))
        logger.info("listed calendar events", count=len(events))
        return events

    async def get_event(self, event_id: str) -> dict[str, Any] | None:
        """Fetch a single event, or None when it does not exist."""
        try:
            item = await self._run(
                "fetch event",
                lambda service: service.events().get(
                    calendarId=PRIMARY_CALENDAR, eventId=event_id
                ),
            )
        except CalendarAPIError as e:
            cause = e.__cause__
            if isinstance(cause, HttpError) and getattr(cause.resp, "status", None) in (404, 410):
                return None
            raise
        try:
            return format_event(item)
        except EventFormatError as e:
            logger.warning("unformattable calendar event", event_id=event_id, error=str(e))
            return None

    async def create_event(self, event: dict[str, Any]) -> dict[str, Any]:
        """Create an event on the primary calendar; returns the API resource."""
        return await self._run(
            "create event",
            lambda service: service.events().insert(
                calendarId=PRIMARY_CALENDAR, body=event
            ),
        )

    async def update_event(self, event_id: str, event: dict[str, Any]) -> dict[str, Any]:
        """Replace an event; returns the updated API resource."""
        return await self._run(
            "update event",
            lambda service: service.events().update(
                calendarId=PRIMARY_CALENDAR, eventId=event_id, body=event
            ),
        )

    async def delete_event(self, event_id: str) -> None:
        await self._run(
            "delete event",
            lambda service: service.events().delete(
                calendarId=PRIMARY_CALENDAR, eventId=event_id
            ),
        )
