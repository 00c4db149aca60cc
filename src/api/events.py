"""Single event lookup for the preparation page."""

import logging
from datetime import datetime
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from src.adapters.calendar_adapter import (
    CalendarAPIError,
    CalendarAuthError,
    GoogleCalendarAdapter,
)
from src.api.calendar import get_calendar_adapter
from src.api.errors import error_response
from src.calendar_grid.layout import format_event_time

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

NO_LOCATION = "No location specified"


def to_event_details(event: dict[str, Any]) -> dict[str, Any]:
    """Shape a flattened calendar event for display.

    Timed events get a long date ("Wednesday, March 20, 2024") and a time
    range in the event's own offset; all-day events keep the raw date and
    read "All day".
    """
    if event.get("isAllDay"):
        date_label = event["start"]
        time_label = "All day"
    else:
        start = datetime.fromisoformat(event["start"].replace("Z", "+00:00"))
        end = datetime.fromisoformat(event["end"].replace("Z", "+00:00"))
        date_label = f"{start.strftime('%A, %B')} {start.day}, {start.year}"
        time_label = f"{format_event_time(start)} - {format_event_time(end)}"

    return {
        "id": event.get("id"),
        "title": event.get("title") or "Untitled Event",
        "description": event.get("description") or "",
        "date": date_label,
        "time": time_label,
        "location": event.get("location") or NO_LOCATION,
        "attendees": event.get("attendees", []),
        "resources": [],
        "questions": [],
    }


@router.get("/{event_id}")
async def get_event(
    event_id: str,
    adapter: Annotated[GoogleCalendarAdapter, Depends(get_calendar_adapter)],
):
    """Fetch one event from the user's calendar."""
    try:
        event = await adapter.get_event(event_id)
    except CalendarAuthError as e:
        return error_response(401, "Not authenticated", str(e))
    except CalendarAPIError as e:
        logger.error(f"Error fetching event {event_id}: {e}")
        return error_response(500, "Failed to fetch event")

    if event is None:
        return error_response(404, "Event not found")
    return to_event_details(event)
