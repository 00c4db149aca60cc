"""Day, week and month layout of normalized events.

Pure functions: they bucket events into days, order them for display and
compute pixel offsets for timed events in day/week columns.
"""

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.calendar_grid.schemas import NormalizedEvent

CalendarView = Literal["month", "week", "day"]

SUNDAY = 6  # date.weekday() numbering
HOUR_HEIGHT_PX = 60
MAX_EVENTS_PER_CELL = 3


class GridModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventPosition(GridModel):
    """Vertical placement of a timed event inside a day column."""

    event_id: str
    top: float
    height: float


class DayCell(GridModel):
    """One day in a month or week grid."""

    day: date
    in_current_month: bool = True
    is_today: bool = False
    events: list[NormalizedEvent] = Field(default_factory=list)
    overflow: int = 0


class DayColumn(GridModel):
    """Day view: all-day strip plus positioned timed events."""

    day: date
    all_day: list[NormalizedEvent] = Field(default_factory=list)
    timed: list[NormalizedEvent] = Field(default_factory=list)
    positions: list[EventPosition] = Field(default_factory=list)


class AgendaDay(GridModel):
    """Agenda grouping of one date's events."""

    date_key: str
    all_day: list[NormalizedEvent] = Field(default_factory=list)
    timed: list[NormalizedEvent] = Field(default_factory=list)


def _localize(value: datetime, tz: tzinfo | None) -> datetime:
    return value.astimezone(tz) if tz is not None else value


def _day_bounds(day: date, tz: tzinfo | None) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=tz)
    return start, start + timedelta(days=1)


def occurs_on(event: NormalizedEvent, day: date, tz: tzinfo | None = None) -> bool:
    """Whether an event should be shown on a given day.

    All-day events match any day in their inclusive date range. Timed
    events match the day they start on and any day they run into.
    """
    if event.is_all_day:
        return event.start_date <= day <= event.end_date

    start = _localize(event.start, tz)
    if start.date() == day:
        return True
    day_start, day_end = _day_bounds(day, tz or event.start.tzinfo)
    return event.start < day_end and event.end > day_start


def sort_day_events(
    events: list[NormalizedEvent],
    *,
    now: datetime | None = None,
    demote_past: bool = False,
) -> list[NormalizedEvent]:
    """Order a day's events for display.

    All-day events first, then timed events by start time. With
    ``demote_past``, events that already ended sink to the bottom.
    """

    def key(event: NormalizedEvent):
        is_past = bool(demote_past and now is not None and event.end < now)
        return (is_past, not event.is_all_day, event.start.timestamp())

    return sorted(events, key=key)


def events_for_day(
    day: date,
    events: list[NormalizedEvent],
    *,
    tz: tzinfo | None = None,
    now: datetime | None = None,
    demote_past: bool = False,
) -> list[NormalizedEvent]:
    """Events shown on ``day``, in display order."""
    matching = [event for event in events if occurs_on(event, day, tz)]
    return sort_day_events(matching, now=now, demote_past=demote_past)


def start_of_week(day: date, week_starts_on: int = SUNDAY) -> date:
    return day - timedelta(days=(day.weekday() - week_starts_on) % 7)


def _cell(
    day: date,
    events: list[NormalizedEvent],
    *,
    month: int | None,
    today: date | None,
    tz: tzinfo | None,
    max_visible: int,
) -> DayCell:
    day_events = events_for_day(day, events, tz=tz)
    return DayCell(
        day=day,
        in_current_month=month is None or day.month == month,
        is_today=day == today,
        events=day_events[:max_visible],
        overflow=max(0, len(day_events) - max_visible),
    )


def month_grid(
    anchor: date,
    events: list[NormalizedEvent],
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
    week_starts_on: int = SUNDAY,
    max_visible: int = MAX_EVENTS_PER_CELL,
) -> list[list[DayCell]]:
    """Weeks of day cells covering the month containing ``anchor``.

    Leading and trailing days from adjacent months fill the first and last
    weeks and are flagged ``in_current_month=False``.
    """
    month_start = anchor.replace(day=1)
    next_month = (month_start + timedelta(days=32)).replace(day=1)
    month_end = next_month - timedelta(days=1)

    day = start_of_week(month_start, week_starts_on)
    last = start_of_week(month_end, week_starts_on) + timedelta(days=6)

    weeks: list[list[DayCell]] = []
    while day <= last:
        week = []
        for _ in range(7):
            week.append(
                _cell(
                    day,
                    events,
                    month=anchor.month,
                    today=today,
                    tz=tz,
                    max_visible=max_visible,
                )
            )
            day += timedelta(days=1)
        weeks.append(week)
    return weeks


def week_grid(
    anchor: date,
    events: list[NormalizedEvent],
    *,
    today: date | None = None,
    tz: tzinfo | None = None,
    week_starts_on: int = SUNDAY,
) -> list[DayCell]:
    """Seven day cells for the week containing ``anchor`` (no overflow cap)."""
    first = start_of_week(anchor, week_starts_on)
    return [
        _cell(
            first + timedelta(days=offset),
            events,
            month=None,
            today=today,
            tz=tz,
            max_visible=len(events),
        )
        for offset in range(7)
    ]


def position_timed_event(
    event: NormalizedEvent,
    day: date,
    *,
    hour_height: float = HOUR_HEIGHT_PX,
    tz: tzinfo | None = None,
) -> EventPosition:
    """Pixel offset and height of a timed event within a day column.

    The event is clipped to the day; very short events get a quarter-hour
    minimum height so they stay clickable.
    """
    zone = tz or event.start.tzinfo
    day_start, day_end = _day_bounds(day, zone)
    start = max(event.start, day_start)
    end = min(event.end, day_end)

    minutes_from_midnight = (start - day_start).total_seconds() / 60
    duration_minutes = max((end - start).total_seconds() / 60, 0)
    px_per_minute = hour_height / 60

    return EventPosition(
        event_id=event.id,
        top=round(minutes_from_midnight * px_per_minute, 2),
        height=round(max(duration_minutes * px_per_minute, hour_height / 4), 2),
    )


def day_column(
    day: date,
    events: list[NormalizedEvent],
    *,
    tz: tzinfo | None = None,
    hour_height: float = HOUR_HEIGHT_PX,
) -> DayColumn:
    """Lay out a single day: all-day strip and positioned timed events."""
    day_events = events_for_day(day, events, tz=tz)
    all_day = [e for e in day_events if e.is_all_day]
    timed = [e for e in day_events if not e.is_all_day]
    return DayColumn(
        day=day,
        all_day=all_day,
        timed=timed,
        positions=[
            position_timed_event(e, day, hour_height=hour_height, tz=tz)
            for e in timed
        ],
    )


def group_agenda(
    events: list[NormalizedEvent], *, tz: tzinfo | None = None
) -> list[AgendaDay]:
    """Group events by start date (YYYY-MM-DD), all-day before timed."""
    groups: dict[str, AgendaDay] = {}
    for event in sort_day_events(events):
        key = _localize(event.start, None if event.is_all_day else tz).date().isoformat()
        group = groups.setdefault(key, AgendaDay(date_key=key))
        if event.is_all_day:
            group.all_day.append(event)
        else:
            group.timed.append(event)
    return [groups[key] for key in sorted(groups)]


def format_event_time(value: datetime, tz: tzinfo | None = None) -> str:
    """Format a time as ``h:mm AM``."""
    local = _localize(value, tz)
    hour = local.hour % 12 or 12
    suffix = "AM" if local.hour < 12 else "PM"
    return f"{hour}:{local.minute:02d} {suffix}"


def event_time_label(event: NormalizedEvent, tz: tzinfo | None = None) -> str:
    if event.is_all_day:
        return "All day"
    return f"{format_event_time(event.start, tz)} - {format_event_time(event.end, tz)}"


def header_title(
    view: CalendarView, anchor: date, week_starts_on: int = SUNDAY
) -> str:
    """Title shown above the grid for the current view."""
    if view == "month":
        return anchor.strftime("%B %Y")
    if view == "week":
        first = start_of_week(anchor, week_starts_on)
        last = first + timedelta(days=6)
        return f"{first.strftime('%b')} {first.day} - {last.strftime('%b')} {last.day}, {last.year}"
    return f"{anchor.strftime('%B')} {anchor.day}, {anchor.year}"


def shift_anchor(view: CalendarView, anchor: date, direction: int) -> date:
    """Move the anchor date one view-length forward (1) or back (-1)."""
    if view == "day":
        return anchor + timedelta(days=direction)
    if view == "week":
        return anchor + timedelta(weeks=direction)
    month_index = anchor.year * 12 + (anchor.month - 1) + direction
    year, month = divmod(month_index, 12)
    month += 1
    # Clamp day to the target month's length
    next_first = date(year + (month == 12), month % 12 + 1, 1)
    last_day = (next_first - timedelta(days=1)).day
    return date(year, month, min(anchor.day, last_day))
