"""Google Calendar endpoints.

- GET /calendar/events: flattened events in a time window
- GET /calendar/grid: month, week or day layout of normalized events
- POST /calendar: token validation callback, event create and update
- DELETE /calendar: delete an event
"""

import logging
from collections.abc import Callable
from datetime import UTC, date, datetime, timedelta
from typing import Annotated, Any, Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from src.adapters.calendar_adapter import (
    CalendarAPIError,
    CalendarAuthError,
    GoogleCalendarAdapter,
)
from src.api.errors import error_response
from src.auth.session import read_tokens, require_access_token, set_tokens_cookie
from src.calendar_grid.layout import (
    SUNDAY,
    day_column,
    header_title,
    month_grid,
    start_of_week,
    week_grid,
)
from src.calendar_grid.normalizer import normalize_events
from src.config import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/calendar", tags=["calendar"])

# Default listing window relative to now
DEFAULT_LOOKBACK = timedelta(days=182)
DEFAULT_LOOKAHEAD = timedelta(days=7)
TOKEN_CHECK_WINDOW = timedelta(hours=24)

CalendarAdapterFactory = Callable[[str], GoogleCalendarAdapter]


class CalendarActionRequest(BaseModel):
    """Body of POST /calendar."""

    action: str | None = None
    event: dict[str, Any] | None = None
    eventId: str | None = None
    access_token: str | None = None


def get_calendar_factory(request: Request) -> CalendarAdapterFactory:
    """Get the per-token calendar adapter factory from app state."""
    factory = getattr(request.app.state, "calendar_adapter_factory", None)
    if factory is None:
        raise HTTPException(status_code=503, detail="Calendar adapter not initialized")
    return factory


def get_calendar_adapter(
    access_token: Annotated[str, Depends(require_access_token)],
    factory: Annotated[CalendarAdapterFactory, Depends(get_calendar_factory)],
) -> GoogleCalendarAdapter:
    """Calendar adapter bound to the caller's access token."""
    return factory(access_token)


def _resolve_zone(name: str | None) -> ZoneInfo:
    try:
        return ZoneInfo(name or settings.default_time_zone)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(status_code=400, detail=f"Unknown time zone: {name}")


@router.get("/events")
async def list_events(
    adapter: Annotated[GoogleCalendarAdapter, Depends(get_calendar_adapter)],
    time_min: Annotated[datetime | None, Query(alias="timeMin")] = None,
    time_max: Annotated[datetime | None, Query(alias="timeMax")] = None,
):
    """List the user's events between timeMin and timeMax.

    Defaults to roughly six months back through seven days ahead.
    """
    now = datetime.now(UTC)
    time_min = time_min or now - DEFAULT_LOOKBACK
    time_max = time_max or now + DEFAULT_LOOKAHEAD

    try:
        events = await adapter.list_events(time_min, time_max)
    except CalendarAuthError as e:
        return error_response(401, "Not authenticated", str(e))
    except CalendarAPIError as e:
        logger.error(f"Error fetching calendar events: {e}")
        return error_response(500, "Failed to fetch calendar events", str(e))

    return {"events": events}


def _grid_window(
    view: str, anchor: date, tz: ZoneInfo
) -> tuple[datetime, datetime]:
    """Time window covering every cell of the requested view."""
    if view == "day":
        first, last = anchor, anchor
    elif view == "week":
        first = start_of_week(anchor, SUNDAY)
        last = first + timedelta(days=6)
    else:
        month_start = anchor.replace(day=1)
        first = start_of_week(month_start, SUNDAY)
        last = first + timedelta(weeks=6)
    start = datetime.combine(first, datetime.min.time(), tzinfo=tz)
    end = datetime.combine(last + timedelta(days=1), datetime.min.time(), tzinfo=tz)
    return start, end


@router.get("/grid")
async def calendar_grid(
    adapter: Annotated[GoogleCalendarAdapter, Depends(get_calendar_adapter)],
    view: Literal["month", "week", "day"] = "month",
    anchor: Annotated[date | None, Query(alias="date")] = None,
    time_zone: Annotated[str | None, Query(alias="timeZone")] = None,
):
    """Lay out the user's events for a month, week or day view."""
    tz = _resolve_zone(time_zone)
    today = datetime.now(tz).date()
    anchor = anchor or today
    window_start, window_end = _grid_window(view, anchor, tz)

    try:
        raw_events = await adapter.list_events(window_start, window_end)
    except CalendarAuthError as e:
        return error_response(401, "Not authenticated", str(e))
    except CalendarAPIError as e:
        logger.error(f"Error fetching calendar grid events: {e}")
        return error_response(500, "Failed to fetch calendar events", str(e))

    events = normalize_events(raw_events, default_zone=tz.key)
    payload: dict[str, Any] = {
        "view": view,
        "date": anchor.isoformat(),
        "title": header_title(view, anchor),
    }
    if view == "month":
        weeks = month_grid(anchor, events, today=today, tz=tz)
        payload["weeks"] = [
            [cell.model_dump(mode="json", by_alias=True) for cell in week]
            for week in weeks
        ]
    elif view == "week":
        payload["days"] = [
            cell.model_dump(mode="json", by_alias=True)
            for cell in week_grid(anchor, events, today=today, tz=tz)
        ]
    else:
        payload["day"] = day_column(anchor, events, tz=tz).model_dump(
            mode="json", by_alias=True
        )
    return payload


async def _validate_token(
    access_token: str, factory: CalendarAdapterFactory
) -> JSONResponse:
    """Check a token with a 24 hour listing and store it in the cookie."""
    now = datetime.now(UTC)
    try:
        await factory(access_token).list_events(now, now + TOKEN_CHECK_WINDOW)
    except (CalendarAuthError, CalendarAPIError) as e:
        logger.warning(f"Token validation failed: {e}")
        return error_response(401, "Token validation failed", str(e))

    response = JSONResponse({"success": True, "message": "Token validated and stored"})
    set_tokens_cookie(response, access_token)
    return response


@router.post("")
async def calendar_action(
    body: CalendarActionRequest,
    request: Request,
    factory: Annotated[CalendarAdapterFactory, Depends(get_calendar_factory)],
):
    """Dispatch on ``action``: ``callback``, ``create`` or ``update``."""
    if body.action == "callback":
        if not body.access_token:
            return error_response(400, "No access token provided")
        return await _validate_token(body.access_token, factory)

    if body.action not in ("create", "update"):
        return error_response(400, "Invalid action")

    tokens = read_tokens(request)
    if tokens is None:
        return error_response(401, "Not authenticated")
    if body.event is None:
        return error_response(400, "Event data is required")
    if body.action == "update" and not body.eventId:
        return error_response(400, "Event ID is required")

    adapter = factory(tokens.access_token)
    try:
        if body.action == "create":
            return await adapter.create_event(body.event)
        return await adapter.update_event(body.eventId, body.event)
    except CalendarAuthError as e:
        return error_response(401, "Not authenticated", str(e))
    except CalendarAPIError as e:
        logger.error(f"Calendar {body.action} failed: {e}")
        return error_response(500, "Internal Server Error", str(e))


@router.delete("")
async def delete_event(
    request: Request,
    factory: Annotated[CalendarAdapterFactory, Depends(get_calendar_factory)],
    event_id: Annotated[str | None, Query(alias="eventId")] = None,
):
    """Delete an event from the primary calendar."""
    if not event_id:
        return error_response(400, "Event ID is required")

    tokens = read_tokens(request)
    if tokens is None:
        return error_response(401, "Not authenticated")

    try:
        await factory(tokens.access_token).delete_event(event_id)
    except CalendarAuthError as e:
        return error_response(401, "Not authenticated", str(e))
    except CalendarAPIError as e:
        logger.error(f"Calendar delete failed: {e}")
        return error_response(500, "Internal Server Error", str(e))

    return {"success": True}
