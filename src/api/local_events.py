"""Nearby event lookup endpoints.

- POST /local-events: Google Places plus Eventbrite
- POST /perplexity-events: search-grounded model through OpenRouter
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request

from src.adapters.places_adapter import (
    DEFAULT_RADIUS_METERS,
    LocalEventsError,
    PlacesAdapter,
)
from src.agents.schemas import CamelModel
from src.api.errors import error_response
from src.local_events.service import LocalEventsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["local-events"])


class LocalEventsRequest(CamelModel):
    event_type: str
    location: str = ""
    date: str | None = None
    radius: int = DEFAULT_RADIUS_METERS


class SearchEventsRequest(CamelModel):
    event_type: str
    location: str | None = None


def get_places_adapter(request: Request) -> PlacesAdapter:
    """Get PlacesAdapter from app state."""
    if not hasattr(request.app.state, "places_adapter"):
        raise HTTPException(status_code=503, detail="Places adapter not initialized")
    return request.app.state.places_adapter


def get_local_events_service(request: Request) -> LocalEventsService:
    """Get LocalEventsService from app state."""
    if not hasattr(request.app.state, "local_events_service"):
        raise HTTPException(
            status_code=503, detail="Local events service not initialized"
        )
    return request.app.state.local_events_service


@router.post("/local-events")
async def local_events(
    body: LocalEventsRequest,
    places: Annotated[PlacesAdapter, Depends(get_places_adapter)],
):
    """Places and Eventbrite results for an event type near a location."""
    try:
        events = await places.find_local_events(
            body.event_type, body.location, body.date, body.radius
        )
    except LocalEventsError as e:
        logger.error(f"Error in local events lookup: {e}")
        return error_response(500, str(e))

    return {"events": [e.model_dump(by_alias=True, exclude_none=True) for e in events]}


@router.post("/perplexity-events")
async def perplexity_events(
    body: SearchEventsRequest,
    service: Annotated[LocalEventsService, Depends(get_local_events_service)],
):
    """Upcoming events found by the search-grounded model."""
    try:
        events = await service.find_events(body.event_type, body.location)
    except LocalEventsError as e:
        logger.error(f"Error in events search: {e}")
        return error_response(500, str(e))

    return {"events": [e.model_dump(by_alias=True, exclude_none=True) for e in events]}
