"""Preparation and classification endpoints.

- POST /preparation: generate preparation materials for an event
- POST /classify-event: label an event with a type and the user's role
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import Field

from src.adapters.maps_adapter import CommuteError, MapsAdapter
from src.adapters.places_adapter import LocalEventsError
from src.agents.registry import AgentNotFoundError, AgentRegistry
from src.agents.schemas import CamelModel, PreparationInput
from src.api.errors import error_response
from src.classification.classifier import ClassificationError, EventClassifier
from src.classification.schemas import ClassifyEventRequest
from src.config import settings
from src.local_events.service import LocalEventsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["preparation"])

HOLIDAY_EVENT_TYPE = "holiday"


class PreparationRequest(CamelModel):
    """Raw preparation request; the title is checked by the handler."""

    event_title: str | None = None
    event_description: str | None = None
    event_date: str | None = None
    event_time: str | None = None
    attendees: list[str] = Field(default_factory=list)
    previous_meeting_notes: str | None = None
    user_role: str | None = None
    event_type: str | None = None
    location: str | None = None

    def to_input(self) -> PreparationInput:
        return PreparationInput(
            event_title=(self.event_title or "").strip(),
            event_description=(self.event_description or "").strip(),
            event_date=self.event_date or "",
            event_time=self.event_time or "",
            attendees=self.attendees,
            previous_meeting_notes=self.previous_meeting_notes,
            user_role=self.user_role,
            event_type=self.event_type,
            location=self.location or settings.default_location,
        )


def get_agent_registry(request: Request) -> AgentRegistry:
    """Get AgentRegistry from app state."""
    if not hasattr(request.app.state, "agent_registry"):
        raise HTTPException(status_code=503, detail="Agent registry not initialized")
    return request.app.state.agent_registry


def get_classifier(request: Request) -> EventClassifier:
    """Get EventClassifier from app state."""
    if not hasattr(request.app.state, "classifier"):
        raise HTTPException(status_code=503, detail="Classifier not initialized")
    return request.app.state.classifier


def get_maps_adapter(request: Request) -> MapsAdapter | None:
    return getattr(request.app.state, "maps_adapter", None)


def get_local_events_service(request: Request) -> LocalEventsService | None:
    return getattr(request.app.state, "local_events_service", None)


async def _add_commute(
    materials: dict[str, Any], input: PreparationInput, maps: MapsAdapter | None
) -> None:
    """Attach commuteInfo to locationDetails when the agent gave an address."""
    details = materials.get("locationDetails")
    if maps is None or not isinstance(details, dict) or not details.get("address"):
        return
    try:
        commute = await maps.calculate_commute(
            details["address"],
            input.location,
            input.event_date,
            input.event_time,
        )
    except CommuteError as e:
        logger.error(f"Error calculating commute: {e}")
        return
    materials["locationDetails"] = {
        **details,
        "commuteInfo": commute.model_dump(by_alias=True),
    }


async def _add_local_events(
    materials: dict[str, Any],
    input: PreparationInput,
    local_events: LocalEventsService | None,
) -> None:
    """Attach nearby events to holiday materials."""
    if local_events is None:
        return
    try:
        events = await local_events.find_events(input.event_title, input.location)
    except LocalEventsError as e:
        logger.error(f"Error fetching local events: {e}")
        return
    materials.setdefault("traditionSuggestions", [])
    materials["localEvents"] = [
        event.model_dump(by_alias=True, exclude_none=True) for event in events
    ]
    logger.info(f"Added {len(events)} local events to holiday preparation")


@router.post("/preparation")
async def create_preparation(
    body: PreparationRequest,
    registry: Annotated[AgentRegistry, Depends(get_agent_registry)],
    maps: Annotated[MapsAdapter | None, Depends(get_maps_adapter)],
    local_events: Annotated[
        LocalEventsService | None, Depends(get_local_events_service)
    ],
):
    """Generate preparation materials for an event.

    The agent is chosen by ``eventType`` (``default`` when absent). Fitness
    materials with a venue address gain a commute estimate; holiday
    materials gain nearby events. Neither enrichment can fail the request.

    Returns:
        Preparation materials as produced by the agent, or an error body
    """
    if not (body.event_title or "").strip():
        return error_response(
            400,
            "Please provide Event Title",
            {"missingFields": ["Event Title"]},
        )

    input = body.to_input()
    logger.info(
        f"Generating preparation for '{input.event_title}' "
        f"with agent type '{input.event_type or 'default'}'"
    )

    try:
        materials = await registry.generate_preparation(input)
    except AgentNotFoundError as e:
        logger.error(f"Error in preparation: {e}")
        return error_response(500, str(e))

    await _add_commute(materials, input, maps)
    if input.event_type == HOLIDAY_EVENT_TYPE:
        await _add_local_events(materials, input, local_events)

    return materials


@router.post("/classify-event")
async def classify_event(
    body: ClassifyEventRequest,
    classifier: Annotated[EventClassifier, Depends(get_classifier)],
):
    """Classify an event's type and the user's role in it."""
    if not body.title.strip():
        return error_response(400, "Event title is required")

    try:
        result = await classifier.classify(body.title, body.description)
    except ClassificationError as e:
        logger.error(f"Error classifying event: {e}")
        return error_response(500, "Failed to classify event", str(e))

    return result.model_dump(by_alias=True)
