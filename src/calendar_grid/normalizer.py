"""Normalization of raw calendar events for display.

Accepts Google Calendar API events (``start.date`` or ``start.dateTime``),
events already flattened by the calendar adapter, and ad hoc ``date``
shapes. Malformed events are dropped, never raised.
"""

from datetime import date, datetime, time, timedelta
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
from pydantic import ValidationError

from src.calendar_grid.schemas import (
    DEFAULT_CALENDAR_COLOR,
    DEFAULT_CALENDAR_NAME,
    AllDayEvent,
    DisplayType,
    NormalizedEvent,
    TimedEvent,
)

logger = structlog.get_logger()

DEFAULT_TIMED_DURATION = timedelta(hours=1)
END_OF_DAY = time(23, 59, 59, 999000)


class EventParseError(ValueError):
    """Raised when a raw event has no usable date information."""

    pass


def _zone(name: str | None, default_zone: str) -> tuple[str, ZoneInfo]:
    for candidate in (name, default_zone, "UTC"):
        if not candidate:
            continue
        try:
            return candidate, ZoneInfo(candidate)
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            continue
    return "UTC", ZoneInfo("UTC")


def _parse_datetime(value: Any, tz: ZoneInfo) -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise EventParseError(f"Unsupported datetime value: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise EventParseError(f"Unsupported date value: {value!r}")


def _display_type(raw: dict[str, Any], is_all_day: bool) -> DisplayType:
    if is_all_day:
        return "all-day"
    source = str(raw.get("source") or "")
    raw_type = str(raw.get("eventType") or "").lower()
    if "#holiday" in source or raw_type == "holiday":
        return "holiday"
    if "#contacts" in source or raw_type == "birthday":
        return "birthday"
    return "default"


def _resolve_range(
    raw: dict[str, Any], tz: ZoneInfo
) -> tuple[datetime, datetime, bool]:
    """Work out (start, end, is_all_day) from any supported raw shape."""
    start = raw.get("start")
    end = raw.get("end")
    flagged_all_day = bool(raw.get("isAllDay") or raw.get("allDay"))

    if isinstance(start, dict) and start.get("dateTime"):
        start_dt = _parse_datetime(start["dateTime"], tz)
        if isinstance(end, dict) and end.get("dateTime"):
            end_dt = _parse_datetime(end["dateTime"], tz)
        else:
            end_dt = start_dt + DEFAULT_TIMED_DURATION
        return start_dt, end_dt, False

    if isinstance(start, dict) and start.get("date"):
        first = _parse_date(start["date"])
        if isinstance(end, dict) and end.get("date"):
            # Google's all-day end date is exclusive
            last = _parse_date(end["date"]) - timedelta(days=1)
        else:
            last = first
        return _all_day_bounds(first, max(first, last), tz)

    # Flattened adapter shape: start/end are strings, flag says which kind
    if isinstance(start, str | datetime | date):
        bare_date = isinstance(start, date) and not isinstance(start, datetime)
        if (
            flagged_all_day
            or bare_date
            or (isinstance(start, str) and len(start) == 10)
        ):
            first = _parse_date(start)
            last = _parse_date(end) - timedelta(days=1) if end else first
            return _all_day_bounds(first, max(first, last), tz)
        start_dt = _parse_datetime(start, tz)
        end_dt = _parse_datetime(end, tz) if end else start_dt + DEFAULT_TIMED_DURATION
        return start_dt, end_dt, False

    if raw.get("date") is not None:
        day = _parse_date(raw["date"])
        return _all_day_bounds(day, day, tz)

    raise EventParseError("Event missing date information")


def _all_day_bounds(
    first: date, last: date, tz: ZoneInfo
) -> tuple[datetime, datetime, bool]:
    return (
        datetime.combine(first, time.min, tzinfo=tz),
        datetime.combine(last, END_OF_DAY, tzinfo=tz),
        True,
    )


def normalize_event(
    raw: Any, *, default_zone: str = "UTC"
) -> NormalizedEvent | None:
    """Convert one raw event into a NormalizedEvent.

    Args:
        raw: Raw event mapping
        default_zone: Time zone used when the event names none

    Returns:
        AllDayEvent or TimedEvent, or None when the event is malformed
    """
    if not isinstance(raw, dict):
        logger.warning("skipping invalid event", event=repr(raw)[:200])
        return None

    start = raw.get("start")
    end = raw.get("end")
    zone_name = (
        (start.get("timeZone") if isinstance(start, dict) else None)
        or (end.get("timeZone") if isinstance(end, dict) else None)
        or raw.get("timeZone")
    )
    try:
        zone_name, tz = _zone(zone_name, default_zone)
        start_dt, end_dt, is_all_day = _resolve_range(raw, tz)
        fields = {
            "id": str(raw.get("id") or f"event-{start_dt.isoformat()}"),
            "title": raw.get("title") or raw.get("summary") or "Untitled Event",
            "start": start_dt,
            "end": end_dt,
            "type": _display_type(raw, is_all_day),
            "color": raw.get("calendarColor") or DEFAULT_CALENDAR_COLOR,
            "calendar_name": raw.get("calendarSummary") or DEFAULT_CALENDAR_NAME,
            "time_zone": zone_name,
        }
        if is_all_day:
            return AllDayEvent(**fields)
        return TimedEvent(**fields)
    except (
        EventParseError,
        ValueError,
        TypeError,
        OverflowError,
        ValidationError,
    ) as e:
        logger.warning(
            "error normalizing event",
            event_id=raw.get("id"),
            error=str(e),
        )
        return None


def normalize_events(
    raw_events: list[Any], *, default_zone: str = "UTC"
) -> list[NormalizedEvent]:
    """Normalize a list of raw events, dropping malformed ones."""
    normalized = []
    for raw in raw_events:
        event = normalize_event(raw, default_zone=default_zone)
        if event is not None:
            normalized.append(event)
    return normalized
