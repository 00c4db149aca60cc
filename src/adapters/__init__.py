"""Adapters for external Google and event-listing APIs.

- GoogleCalendarAdapter: List and edit events on the user's primary calendar
- MapsAdapter: Commute estimates via the Distance Matrix API
- PlacesAdapter: Nearby places and Eventbrite events
"""

from src.adapters.calendar_adapter import (
    CalendarAPIError,
    CalendarAuthError,
    GoogleCalendarAdapter,
)
from src.adapters.maps_adapter import CommuteError, MapsAdapter
from src.adapters.places_adapter import LocalEventsError, PlacesAdapter

__all__ = [
    "CalendarAPIError",
    "CalendarAuthError",
    "CommuteError",
    "GoogleCalendarAdapter",
    "LocalEventsError",
    "MapsAdapter",
    "PlacesAdapter",
]
