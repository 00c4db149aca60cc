"""Calendar event normalization and grid layout."""

from src.calendar_grid.layout import (
    events_for_day,
    group_agenda,
    month_grid,
    position_timed_event,
    sort_day_events,
    week_grid,
)
from src.calendar_grid.normalizer import normalize_event, normalize_events
from src.calendar_grid.schemas import AllDayEvent, NormalizedEvent, TimedEvent

__all__ = [
    "AllDayEvent",
    "NormalizedEvent",
    "TimedEvent",
    "events_for_day",
    "group_agenda",
    "month_grid",
    "normalize_event",
    "normalize_events",
    "position_timed_event",
    "sort_day_events",
    "week_grid",
]
