"""Google Maps Distance Matrix adapter for commute estimates.

Estimates driving (with traffic) and transit time from the user's
location to an event venue, departing at the event start when it is in
the future.
"""

import re
from datetime import datetime

import dateparser
import httpx
import structlog

from src.agents.schemas import CommuteInfo
from src.config import settings

logger = structlog.get_logger()

DISTANCE_MATRIX_URL = "https://maps.googleapis.com/maps/api/distancematrix/json"

_TIME_PATTERN = re.compile(
    r"^\s*(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<period>[AaPp][Mm])?\s*$"
)


class CommuteError(Exception):
    """Raised when a commute estimate cannot be produced."""

    pass


def parse_event_time(
    event_date: str | None,
    event_time: str | None,
    *,
    now: datetime | None = None,
) -> datetime | None:
    """Combine a display date and time into a departure datetime.

    Only the start of a range ("2:00 PM - 3:00 PM") is used. Both 12-hour
    "2:00 PM" and 24-hour "14:00" forms are accepted.

    Args:
        event_date: Date string in any format dateparser understands
        event_time: Time string or range
        now: Reference time for relative dates ("tomorrow")

    Returns:
        Naive local datetime, or None when either part is unparseable
    """
    if not event_date or not event_time:
        return None

    match = _TIME_PATTERN.match(event_time.split("-")[0])
    if not match:
        logger.warning("unparseable event time", event_time=event_time)
        return None

    hour = int(match.group("hour"))
    minute = int(match.group("minute") or 0)
    period = (match.group("period") or "").upper()
    if period == "PM" and hour != 12:
        hour += 12
    elif period == "AM" and hour == 12:
        hour = 0
    if hour > 23 or minute > 59:
        return None

    parser_settings = {"RELATIVE_BASE": now} if now else None
    parsed_date = dateparser.parse(event_date, settings=parser_settings)
    if parsed_date is None:
        logger.warning("unparseable event date", event_date=event_date)
        return None

    return parsed_date.replace(hour=hour, minute=minute, second=0, microsecond=0, tzinfo=None)


def _text(element: dict, key: str) -> str | None:
    value = element.get(key)
    if isinstance(value, dict) and isinstance(value.get("text"), str):
        return value["text"]
    return None


def _time_context(departure: datetime | None, now: datetime) -> str:
    if departure is None or departure <= now:
        return "now"
    hour = departure.hour % 12 or 12
    suffix = "AM" if departure.hour < 12 else "PM"
    return (
        f"at {hour}:{departure.minute:02d} {suffix} "
        f"on {departure.month}/{departure.day}/{departure.year}"
    )


class MapsAdapter:
    """Adapter for the Distance Matrix API."""

    def __init__(
        self,
        api_key: str | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize adapter.

        Args:
            api_key: Google Maps API key. Falls back to GOOGLE_MAPS_API_KEY.
            http_client: Optional client for dependency injection
        """
        self._api_key = api_key or settings.google_maps_api_key
        self._http = http_client

    async def _element(
        self,
        client: httpx.AsyncClient,
        origin: str,
        destination: str,
        mode: str,
        departure: datetime | None,
    ) -> dict:
        params = {
            "origins": origin,
            "destinations": destination,
            "mode": mode,
            "departure_time": int(departure.timestamp()) if departure else "now",
            "key": self._api_key,
        }
        if mode == "driving":
            params["traffic_model"] = "best_guess"

        response = await client.get(DISTANCE_MATRIX_URL, params=params)
        response.raise_for_status()
        try:
            data = response.json()
        except ValueError as e:
            raise CommuteError(f"Distance Matrix {mode} returned invalid JSON") from e
        if not isinstance(data, dict):
            raise CommuteError(f"Distance Matrix {mode} returned unexpected payload")
        if data.get("status") not in (None, "OK"):
            raise CommuteError(
                f"Distance Matrix {mode} request failed: "
                f"{data.get('error_message') or data.get('status')}"
            )
        rows = data.get("rows") or [{}]
        elements = (rows[0] if isinstance(rows[0], dict) else {}).get("elements") or [{}]
        return elements[0] if isinstance(elements[0], dict) else {}

    async def calculate_commute(
        self,
        destination: str,
        origin: str | None = None,
        event_date: str | None = None,
        event_time: str | None = None,
    ) -> CommuteInfo:
        """Estimate the commute to an event.

        Makes two Distance Matrix calls: driving with a best-guess traffic
        model, then transit.

        Args:
            destination: Venue address
            origin: Starting point (defaults to the configured location)
            event_date: Event display date
            event_time: Event display time or range

        Returns:
            CommuteInfo with distance, durations and labelled options

        Raises:
            CommuteError: If the API key is missing or a request fails
        """
        if not self._api_key:
            raise CommuteError("Google Maps API key not configured")

        origin = origin or settings.default_location
        now = datetime.now()
        departure = parse_event_time(event_date, event_time, now=now)
        future_departure = departure if departure and departure > now else None

        logger.info(
            "calculating commute",
            destination=destination,
            origin=origin,
            departure=departure.isoformat() if departure else "now",
        )

        client = self._http or httpx.AsyncClient()
        try:
            driving = await self._element(
                client, origin, destination, "driving", future_departure
            )
            transit = await self._element(
                client, origin, destination, "transit", future_departure
            )
        except httpx.HTTPError as e:
            logger.error("commute request failed", error=str(e))
            raise CommuteError(f"Distance Matrix request failed: {e}") from e
        finally:
            if self._http is None:
                await client.aclose()

        transit_time = _text(transit, "duration")
        drive_time = _text(driving, "duration")
        traffic_time = _text(driving, "duration_in_traffic")

        options = []
        if transit.get("status") == "OK" and transit_time:
            options.append(f"Transit: {transit_time}")
        if driving.get("status") == "OK" and drive_time:
            options.append(f"Drive: {drive_time}")
            if traffic_time:
                options.append(f"Drive (with traffic): {traffic_time}")

        context = _time_context(departure, now)
        return CommuteInfo(
            distance=_text(driving, "distance"),
            duration=drive_time,
            traffic_duration=traffic_time,
            transit_options=[f"{option} ({context})" for option in options],
        )
