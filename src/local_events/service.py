"""Local events lookup through a search-grounded model on OpenRouter.

Used directly by the perplexity-events endpoint and to enrich holiday
preparation materials.
"""

import structlog
from pydantic import ValidationError

from src.adapters.places_adapter import LocalEventsError
from src.agents.schemas import LocalEvent
from src.config import settings
from src.services.json_result import parse_json_object, strip_code_fences
from src.services.llm_client import CompletionClient, LLMClientError

logger = structlog.get_logger()

LOCAL_EVENTS_TEMPERATURE = 0.5
SOURCE_NAME = "Perplexity Sonar"

SYSTEM_MESSAGE = (
    "You are a helpful assistant that finds local events and formats them as "
    "JSON. Always respond with valid JSON in the exact format specified. If no "
    "events are found, return an empty array."
)

QUERY_TEMPLATE = """Search for upcoming {event_type} events or celebrations in or near {location}. Return the results as a JSON object with an 'events' array. Each event should have these fields:
- name (required): The event name
- description: A brief description of the event
- location: The venue or address
- date: The event date in YYYY-MM-DD format
- time: The event time in HH:MM format
- link: Website URL for more information

Example format:
{{
  "events": [
    {{
      "name": "Example Event",
      "description": "Brief description here",
      "location": "123 Main St, City, State",
      "date": "2024-03-20",
      "time": "18:00",
      "link": "https://example.com"
    }}
  ]
}}"""


def _to_local_event(item: dict) -> LocalEvent:
    date = item.get("date")
    if isinstance(date, str):
        # Models mark approximate dates as 2024-12-XX
        date = date.replace("X", "1")
    return LocalEvent(
        name=item.get("name") or "Untitled Event",
        description=item.get("description"),
        location=item.get("location") or "Location TBA",
        date=date,
        time=item.get("time"),
        link=item.get("link"),
        source=SOURCE_NAME,
    )


class LocalEventsService:
    """Asks the local-events model for upcoming events near a location."""

    def __init__(self, llm_client: CompletionClient):
        """Initialize service.

        Args:
            llm_client: Client used for the completion call
        """
        self._llm = llm_client

    async def find_events(
        self, event_type: str, location: str | None = None
    ) -> list[LocalEvent]:
        """Find upcoming events of a kind near a location.

        A response that does not parse yields an empty list.

        Args:
            event_type: What to search for (event title or type)
            location: Where to search; defaults to the configured location

        Returns:
            Local events attributed to the search model

        Raises:
            LocalEventsError: If the completion call fails
        """
        location = location or settings.default_location
        messages = [
            {"role": "system", "content": SYSTEM_MESSAGE},
            {
                "role": "user",
                "content": QUERY_TEMPLATE.format(event_type=event_type, location=location),
            },
        ]

        try:
            content = await self._llm.complete(
                messages,
                temperature=LOCAL_EVENTS_TEMPERATURE,
                json_mode=True,
                model=settings.local_events_model,
            )
        except LLMClientError as e:
            raise LocalEventsError(str(e)) from e

        parsed = parse_json_object(strip_code_fences(content)).unwrap_or_default({})
        items = parsed.get("events")
        if not isinstance(items, list):
            logger.warning("local events response had no events array", event_type=event_type)
            return []

        events = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                events.append(_to_local_event(item))
            except ValidationError as e:
                logger.warning(
                    "skipping malformed local event",
                    event_type=event_type,
                    error=str(e),
                )
        logger.info("found local events", event_type=event_type, location=location, count=len(events))
        return events
