"""Google Places and Eventbrite adapter for nearby events.

Geocodes the user's location, searches Places for the event type, then
enriches the top results with Place Details. Eventbrite results are
appended when an API key is configured.
"""

import asyncio
import math
from typing import Any

import httpx
import structlog

from src.agents.schemas import LocalEvent
from src.config import settings

logger = structlog.get_logger()

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
TEXT_SEARCH_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"
DETAILS_URL = "https://maps.googleapis.com/maps/api/place/details/json"
EVENTBRITE_SEARCH_URL = "https://www.eventbriteapi.com/v3/events/search/"

DETAIL_FIELDS = (
    "name,formatted_address,rating,website,formatted_phone_number,"
    "opening_hours,price_level"
)
MAX_PLACES = 5
MAX_EVENTBRITE_EVENTS = 3
DEFAULT_RADIUS_METERS = 5000


class LocalEventsError(Exception):
    """Raised when nearby events cannot be looked up."""

    pass


def _distance_km(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance between two coordinates."""
    r = 6371.0
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lng2 - lng1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return 2 * r * math.asin(math.sqrt(a))


class PlacesAdapter:
    """Adapter for Google Places (plus optional Eventbrite) lookups."""

    def __init__(
        self,
        api_key: str | None = None,
        eventbrite_api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key or settings.google_places_api_key
        self._eventbrite_key = eventbrite_api_key or settings.eventbrite_api_key
        self._http = http_client

    async def _get_json(
        self, client: httpx.AsyncClient, url: str, params: dict[str, Any]
    ) -> dict:
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as e:
            raise LocalEventsError(f"Request to {url} failed: {e}") from e

    async def _geocode(
        self, client: httpx.AsyncClient, location: str
    ) -> tuple[float, float]:
        data = await self._get_json(
            client, GEOCODE_URL, {"address": location, "key": self._api_key}
        )
        if data.get("error_message"):
            raise LocalEventsError(f"Geocoding failed: {data['error_message']}")
        results = data.get("results") or []
        coords = results[0].get("geometry", {}).get("location") if results else None
        if not coords:
            raise LocalEventsError("Could not geocode location")
        return coords["lat"], coords["lng"]

    async def _place_event(
        self,
        client: httpx.AsyncClient,
        place: dict[str, Any],
        origin: tuple[float, float],
    ) -> LocalEvent:
        data = await self._get_json(
            client,
            DETAILS_URL,
            {
                "place_id": place.get("place_id"),
                "fields": DETAIL_FIELDS,
                "key": self._api_key,
            },
        )
        details = data.get("result") or {}

        distance = None
        coords = place.get("geometry", {}).get("location")
        if coords:
            km = _distance_km(origin[0], origin[1], coords["lat"], coords["lng"])
            distance = f"{km:.1f} km"

        return LocalEvent(
            name=place.get("name") or details.get("name") or "Unnamed place",
            description=place.get("formatted_address"),
            location=details.get("formatted_address")
            or place.get("formatted_address")
            or "Location TBA",
            source="Google Places",
            rating=details.get("rating") or place.get("rating"),
            link=details.get("website"),
            distance=distance,
        )

    async def _eventbrite_events(
        self,
        client: httpx.AsyncClient,
        query: str,
        origin: tuple[float, float],
        radius: int,
    ) -> list[LocalEvent]:
        data = await self._get_json(
            client,
            EVENTBRITE_SEARCH_URL,
            {
                "q": query,
                "location.latitude": origin[0],
                "location.longitude": origin[1],
                "location.within": f"{radius}m",
                "token": self._eventbrite_key,
            },
        )
        events = []
        for item in (data.get("events") or [])[:MAX_EVENTBRITE_EVENTS]:
            start_local = (item.get("start") or {}).get("local") or ""
            date_part, _, time_part = start_local.partition("T")
            venue_address = ((item.get("venue") or {}).get("address") or {})
            events.append(
                LocalEvent(
                    name=(item.get("name") or {}).get("text") or "Untitled Event",
                    description=(item.get("description") or {}).get("text"),
                    location=venue_address.get("localized_address_display")
                    or "Location TBA",
                    date=date_part or None,
                    time=time_part or None,
                    link=item.get("url"),
                    source="Eventbrite",
                    attendees=item.get("capacity"),
                )
            )
        return events

    async def find_local_events(
        self,
        event_type: str,
        location: str,
        date: str | None = None,
        radius: int = DEFAULT_RADIUS_METERS,
    ) -> list[LocalEvent]:
        """Find places and events related to an event type near a location.

        Place Details lookups for the top results run concurrently. Eventbrite
        failures are logged and do not fail the lookup.

        Args:
            event_type: Kind of event to search for (e.g. "holiday")
            location: Free-text location to geocode
            date: Optional date appended to the search query
            radius: Search radius in meters

        Returns:
            Places results followed by any Eventbrite results

        Raises:
            LocalEventsError: If the Places key is missing or Google calls fail
        """
        if not self._api_key:
            raise LocalEventsError("Google Places API key not configured")

        query = f"{event_type} events {date or ''}".strip()
        client = self._http or httpx.AsyncClient()
        try:
            origin = await self._geocode(client, location)
            logger.info("geocoded location", location=location, lat=origin[0], lng=origin[1])

            data = await self._get_json(
                client,
                TEXT_SEARCH_URL,
                {
                    "query": query,
                    "location": f"{origin[0]},{origin[1]}",
                    "radius": radius,
                    "key": self._api_key,
                },
            )
            if data.get("error_message"):
                raise LocalEventsError(f"Places API failed: {data['error_message']}")
            if data.get("results") is None:
                raise LocalEventsError("No results found")

            events = list(
                await asyncio.gather(
                    *(
                        self._place_event(client, place, origin)
                        for place in data["results"][:MAX_PLACES]
                    )
                )
            )

            if self._eventbrite_key:
                try:
                    events.extend(
                        await self._eventbrite_events(client, query, origin, radius)
                    )
                except LocalEventsError as e:
                    logger.warning("eventbrite lookup failed", error=str(e))
        finally:
            if self._http is None:
                await client.aclose()

        logger.info("found local events", query=query, count=len(events))
        return events
