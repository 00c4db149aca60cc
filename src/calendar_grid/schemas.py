"""Normalized calendar event types.

A normalized event is either all-day or timed, discriminated by ``kind``.
All-day events span whole local days: start at 00:00:00.000 and end at
23:59:59.999 on the last (inclusive) day.
"""

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from pydantic.alias_generators import to_camel

DisplayType = Literal["default", "holiday", "birthday", "all-day"]

DEFAULT_CALENDAR_COLOR = "#4285F4"
DEFAULT_CALENDAR_NAME = "Calendar"


class _NormalizedEventBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    title: str
    start: datetime
    end: datetime
    type: DisplayType = "default"
    color: str = DEFAULT_CALENDAR_COLOR
    calendar_name: str = DEFAULT_CALENDAR_NAME
    time_zone: str

    @model_validator(mode="after")
    def _check_order(self):
        if self.start > self.end:
            raise ValueError("event start is after its end")
        return self

    @property
    def start_date(self) -> date:
        return self.start.date()

    @property
    def end_date(self) -> date:
        return self.end.date()


class AllDayEvent(_NormalizedEventBase):
    """Event covering whole days, inclusive of ``end``'s date."""

    kind: Literal["all_day"] = "all_day"
    type: DisplayType = "all-day"

    @computed_field
    @property
    def is_all_day(self) -> bool:
        return True


class TimedEvent(_NormalizedEventBase):
    """Event with explicit start and end instants."""

    kind: Literal["timed"] = "timed"

    @computed_field
    @property
    def is_all_day(self) -> bool:
        return False


NormalizedEvent = Annotated[AllDayEvent | TimedEvent, Field(discriminator="kind")]
