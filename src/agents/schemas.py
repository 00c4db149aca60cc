"""Schemas for event preparation.

Wire format is camelCase to match the browser client; Python attributes
are snake_case. Output models allow extra fields because generated
materials are returned as the model produced them.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PreparationInput(CamelModel):
    """Event details submitted for preparation. Immutable once built."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    event_title: str = Field(description="Event title (required, non-empty)")
    event_description: str = Field(default="", description="Free-text description")
    event_date: str = Field(default="", description="Display date of the event")
    event_time: str = Field(default="", description="Display time, e.g. '2:00 PM - 3:00 PM'")
    attendees: list[str] = Field(default_factory=list)
    previous_meeting_notes: str | None = Field(default=None)
    user_role: str | None = Field(default=None)
    event_type: str | None = Field(default=None)
    location: str | None = Field(default=None, description="User's origin location")


class CommuteInfo(CamelModel):
    """Human-readable commute estimate."""

    distance: str | None = None
    duration: str | None = None
    traffic_duration: str | None = None
    transit_options: list[str] = Field(default_factory=list)


class LocalEvent(CamelModel):
    """A nearby event or venue surfaced for holiday preparation."""

    name: str
    description: str | None = None
    location: str
    date: str | None = None
    time: str | None = None
    link: str | None = None
    source: str
    distance: str | None = None
    rating: float | None = None
    attendees: int | None = None


class PreparationOutput(CamelModel):
    """Preparation materials shared by every agent."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    summary: str
    key_points: list[str]
    suggested_approach: str
    questions: list[str]
    relevant_topics: list[str]
    action_items: list[str] | None = None


class SocialPreparationOutput(PreparationOutput):
    icebreakers: list[str]
    dress_code: str | None = None
    gift_suggestions: list[str] | None = None
    venue_info: str | None = None


class InterviewPreparationOutput(PreparationOutput):
    common_pitfalls: list[str]
    follow_up_strategy: str
    research_topics: list[str]
    relevant_experience_points: list[str] | None = None
    evaluation_criteria: list[str] | None = None


class LearningPreparationOutput(PreparationOutput):
    prerequisites: list[str]
    recommended_resources: list[str]
    note_taking_strategy: str | None = None
    post_event_practice: list[str] | None = None


class HealthPreparationOutput(PreparationOutput):
    medical_history_items: list[str]
    symptom_tracking: str | None = None
    health_metrics_to_review: list[str] | None = None
    follow_up_questions: list[str] | None = None


class BusinessPreparationOutput(PreparationOutput):
    stakeholder_interests: list[str] | None = None
    negotiation_points: list[str] | None = None
    market_insights: list[str] | None = None
    competitive_analysis: str | None = None


class PresentationPreparationOutput(PreparationOutput):
    slide_deck_tips: list[str] | None = None
    delivery_techniques: list[str] | None = None
    audience_engagement_strategies: list[str] | None = None
    visual_aid_suggestions: list[str] | None = None


class HolidayPreparationOutput(PreparationOutput):
    tradition_suggestions: list[str] | None = None
    cultural_notes: list[str] | None = None
    decoration_ideas: list[str] | None = None
    food_and_beverages: list[str] | None = None
    music_playlist: list[str] | None = None
    gift_exchange_rules: str | None = None
    local_events: list[LocalEvent] | None = None
    holiday_history: str | None = None
    dietary_considerations: list[str] | None = None
    attire_recommendations: str | None = None
    budgeting_tips: list[str] | None = None


class LocationDetails(CamelModel):
    name: str | None = None
    address: str | None = None
    parking_info: str | None = None
    facility_amenities: list[str] = Field(default_factory=list)
    commute_info: CommuteInfo | None = None


class TeamInfo(CamelModel):
    team_name: str | None = None
    opponents: str | None = None
    league_info: str | None = None
    uniform_requirements: str | None = None


class FitnessPreparationOutput(PreparationOutput):
    equipment_needed: list[str]
    warmup_routine: list[str]
    nutrition_tips: list[str]
    hydration_guidelines: str
    weather_considerations: str
    location_details: LocationDetails
    team_info: TeamInfo | None = None
    fitness_goals: list[str]
    recovery_tips: list[str]
    safety_precautions: list[str]
    performance_metrics: list[str]


FALLBACK_PREPARATION = PreparationOutput(
    summary="Failed to generate summary. Please try again later.",
    key_points=["Error generating key points"],
    suggested_approach="Error generating approach",
    questions=["Error generating questions"],
    relevant_topics=["Error generating topics"],
    action_items=["Error generating action items"],
)


def fallback_preparation() -> dict:
    """Fresh copy of the fallback payload in wire format."""
    return FALLBACK_PREPARATION.model_dump(by_alias=True)
