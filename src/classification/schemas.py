"""Schemas for event classification."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EventType(str, Enum):
    """Event types the classifier may assign."""

    MEETING = "meeting"
    PRESENTATION = "presentation"
    INTERVIEW = "interview"
    WORKSHOP = "workshop"
    CONFERENCE = "conference"
    CLIENT = "client"
    TEAM = "team"
    ONE_ON_ONE = "1on1"
    SOCIAL = "social"
    HOLIDAY = "holiday"
    LEARNING = "learning"
    BUSINESS = "business"
    HEALTH = "health"
    WELLNESS = "wellness"


class UserRole(str, Enum):
    """Roles the event creator may hold."""

    HOST = "host"
    PRESENTER = "presenter"
    PARTICIPANT = "participant"
    MANAGER = "manager"
    TEAM_MEMBER = "team_member"
    CLIENT = "client"
    INTERVIEWER = "interviewer"
    INTERVIEWEE = "interviewee"


EVENT_TYPES = frozenset(t.value for t in EventType)
USER_ROLES = frozenset(r.value for r in UserRole)

DEFAULT_EVENT_TYPE = EventType.MEETING
DEFAULT_USER_ROLE = UserRole.HOST
UNCERTAIN_CONFIDENCE = 0.5


class ClassifyEventRequest(BaseModel):
    """Request body for event classification."""

    title: str = Field(default="", description="Event title (required)")
    description: str | None = Field(default="", description="Event description")


class ClassificationResult(BaseModel):
    """Normalized classification, always within the allowed enums."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, use_enum_values=True
    )

    event_type: EventType
    user_role: UserRole
    confidence: float = Field(ge=0.0, le=1.0)
