"""LLM-based event classification with layered fallback.

Parsing degrades in order: substring JSON parse, then regex salvage of
the two labels, then hard defaults. The result is always a valid
ClassificationResult.
"""

import math
import re
from typing import Any

import structlog

from src.classification.schemas import (
    DEFAULT_EVENT_TYPE,
    DEFAULT_USER_ROLE,
    EVENT_TYPES,
    UNCERTAIN_CONFIDENCE,
    USER_ROLES,
    ClassificationResult,
)
from src.services.json_result import extract_json_object
from src.services.llm_client import CompletionClient, LLMClientError

logger = structlog.get_logger()

CLASSIFICATION_TEMPERATURE = 0.0

EVENT_TYPE_PATTERN = re.compile(r'"eventType":\s*"([^"]+)"')
USER_ROLE_PATTERN = re.compile(r'"userRole":\s*"([^"]+)"')


class ClassificationError(Exception):
    """Raised when the classification completion itself fails."""

    pass


class ClassificationFormatError(ValueError):
    """Raised when parsed output lacks required fields."""

    pass


# fmt: off
CLASSIFICATION_PROMPT = (
    "Given an event with the following details:\n"
    "Title: {title}\n"
    "Description: {description}\n\n"
    "Analyze the event and provide:\n"
    "1. The most appropriate event type from this list: {event_types}\n"
    "2. The most likely role of the person creating/adding this event "
    "from this list: {user_roles}\n\n"
    "Consider these guidelines:\n"
    '- For holiday events (like Christmas, Diwali, Holi), use "holiday" type\n'
    '- For medical/doctor appointments, use "health" type\n'
    '- For fitness/yoga/meditation events, use "wellness" type\n'
    '- For team meetings with multiple attendees, use "team" type\n'
    '- For one-on-one meetings, use "1on1" type\n'
    '- Default to "meeting" only if no other type clearly fits\n\n'
    "Respond in JSON format like this:\n"
    "{{\n"
    '  "eventType": "type_here",\n'
    '  "userRole": "role_here",\n'
    '  "confidence": 0.0 to 1.0\n'
    "}}\n\n"
    "Set confidence based on:\n"
    "- 0.9+ if very clear from title/description\n"
    "- 0.7-0.9 if reasonably clear but could be ambiguous\n"
    "- 0.5-0.7 if making an educated guess\n"
    "- Below 0.5 if highly uncertain\n\n"
    "IMPORTANT: Respond ONLY with valid JSON. No additional text or explanations."
)
# fmt: on

_EVENT_TYPE_ORDER = (
    "meeting, presentation, interview, workshop, conference, client, team, "
    "1on1, social, holiday, learning, business, health, wellness"
)
_USER_ROLE_ORDER = (
    "host, presenter, participant, manager, team_member, client, "
    "interviewer, interviewee"
)


def build_classification_prompt(title: str, description: str | None) -> str:
    """Format the classification prompt for an event."""
    return CLASSIFICATION_PROMPT.format(
        title=title,
        description=description or "No description provided",
        event_types=_EVENT_TYPE_ORDER,
        user_roles=_USER_ROLE_ORDER,
    )


def _singularize(event_type: str) -> str:
    """Map a plural label to its singular when the singular is allowed."""
    if event_type.endswith("s") and event_type[:-1] in EVENT_TYPES:
        return event_type[:-1]
    return event_type


def normalize_classification(raw: dict[str, Any]) -> ClassificationResult:
    """Validate and normalize a parsed classifier response.

    Lower-cases and singularizes labels, replaces out-of-vocabulary values
    with defaults and caps confidence at 0.5 when it does.

    Args:
        raw: Parsed JSON object from the model

    Returns:
        ClassificationResult within the allowed enums

    Raises:
        ClassificationFormatError: If required fields are missing or malformed
    """
    event_type = raw.get("eventType")
    user_role = raw.get("userRole")
    confidence = raw.get("confidence")

    if not isinstance(event_type, str) or not event_type:
        raise ClassificationFormatError("Missing eventType")
    if not isinstance(user_role, str) or not user_role:
        raise ClassificationFormatError("Missing userRole")
    if isinstance(confidence, bool) or not isinstance(confidence, int | float):
        raise ClassificationFormatError("confidence is not numeric")
    try:
        confidence = float(confidence)
    except OverflowError as e:
        raise ClassificationFormatError("confidence is out of range") from e
    if not math.isfinite(confidence):
        raise ClassificationFormatError("confidence is not finite")

    event_type = _singularize(event_type.lower())
    user_role = user_role.lower()
    confidence = min(max(confidence, 0.0), 1.0)

    if event_type not in EVENT_TYPES:
        logger.warning("invalid event type received", event_type=event_type)
        event_type = DEFAULT_EVENT_TYPE.value
        confidence = min(confidence, UNCERTAIN_CONFIDENCE)
    if user_role not in USER_ROLES:
        logger.warning("invalid user role received", user_role=user_role)
        user_role = DEFAULT_USER_ROLE.value
        confidence = min(confidence, UNCERTAIN_CONFIDENCE)

    return ClassificationResult(
        event_type=event_type,
        user_role=user_role,
        confidence=confidence,
    )


def salvage_classification(content: str) -> ClassificationResult:
    """Recover labels from malformed output with regexes.

    Args:
        content: Raw completion text

    Returns:
        ClassificationResult at confidence 0.5, defaults for unmatched labels
    """
    type_match = EVENT_TYPE_PATTERN.search(content)
    role_match = USER_ROLE_PATTERN.search(content)

    event_type = type_match.group(1).lower() if type_match else ""
    user_role = role_match.group(1).lower() if role_match else ""

    return ClassificationResult(
        event_type=event_type if event_type in EVENT_TYPES else DEFAULT_EVENT_TYPE,
        user_role=user_role if user_role in USER_ROLES else DEFAULT_USER_ROLE,
        confidence=UNCERTAIN_CONFIDENCE,
    )


def parse_classification(content: str) -> ClassificationResult:
    """Turn raw completion text into a ClassificationResult.

    Never raises: every layer falls through to the next.
    """
    parsed = extract_json_object(content)
    if parsed.is_ok:
        try:
            return normalize_classification(parsed.unwrap())
        except ClassificationFormatError as e:
            logger.error("invalid classification format", error=str(e))
    else:
        logger.error("failed to parse classification", error=str(parsed.error))

    result = salvage_classification(content)
    logger.info(
        "using fallback classification",
        event_type=result.event_type,
        user_role=result.user_role,
    )
    return result


class EventClassifier:
    """Labels an event with a type and the user's role."""

    def __init__(self, llm_client: CompletionClient):
        """Initialize with the classification LLM client.

        Args:
            llm_client: Client chosen by select_classification_client
        """
        self._llm = llm_client

    async def classify(
        self, title: str, description: str | None = ""
    ) -> ClassificationResult:
        """Classify an event from its title and description.

        Args:
            title: Event title (caller ensures non-empty)
            description: Optional event description

        Returns:
            Normalized ClassificationResult

        Raises:
            ClassificationError: If the completion call fails
        """
        prompt = build_classification_prompt(title, description)
        logger.info("sending classification request", title=title)

        try:
            content = await self._llm.complete(
                [{"role": "user", "content": prompt}],
                temperature=CLASSIFICATION_TEMPERATURE,
                json_mode=True,
            )
        except LLMClientError as e:
            raise ClassificationError(str(e)) from e

        result = parse_classification(content)
        logger.info(
            "classification complete",
            event_type=result.event_type,
            user_role=result.user_role,
            confidence=result.confidence,
        )
        return result
