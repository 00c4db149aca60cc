"""Base agent for event preparation.

Provides common infrastructure for per-event-type agents:
- Jinja2 rendering of the agent's user prompt template
- A single completion call in JSON mode
- Fallback materials when the call or the parse fails
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from src.agents.schemas import PreparationInput, PreparationOutput, fallback_preparation
from src.services.json_result import JsonResult, parse_json_object
from src.services.llm_client import CompletionClient, LLMClientError

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

GENERATION_TEMPERATURE = 0.7

_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def role_matches(user_role: str | None, *keywords: str) -> bool:
    """Check whether a free-text role mentions any of the keywords."""
    if not user_role:
        return False
    role = user_role.lower()
    return any(keyword in role for keyword in keywords)


class BaseAgent(ABC):
    """Abstract base class for preparation agents.

    Subclasses supply the persona (system message), the template name and
    any role-dependent template context.
    """

    template_name: str = ""
    output_model: type[PreparationOutput] = PreparationOutput

    def __init__(self, llm_client: CompletionClient):
        """Initialize agent with an LLM client.

        Args:
            llm_client: Client used for the completion call
        """
        self._llm = llm_client

    @abstractmethod
    def system_message(self) -> str:
        """The persona steering tone and domain."""

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        """Template variables beyond the raw input fields."""
        return {}

    def user_prompt(self, input: PreparationInput) -> str:
        """Render the agent's prompt template for the given event.

        Args:
            input: Event details

        Returns:
            Prompt text requesting a single JSON object
        """
        context: dict[str, Any] = {
            "title": input.event_title,
            "description": input.event_description,
            "date": input.event_date,
            "time": input.event_time,
            "attendees": ", ".join(input.attendees),
            "previous_meeting_notes": input.previous_meeting_notes,
            "user_role": input.user_role,
            "event_type": input.event_type,
        }
        context.update(self.prompt_context(input))
        return _env.get_template(self.template_name).render(context)

    async def generate_preparation_materials(
        self, input: PreparationInput
    ) -> dict[str, Any]:
        """Generate preparation materials for an event.

        Makes exactly one completion call. Parsed output is returned as the
        model produced it; any failure yields the fallback materials.

        Args:
            input: Validated event details (non-empty title)

        Returns:
            Preparation materials dict in wire (camelCase) format
        """
        messages = [
            {"role": "system", "content": self.system_message()},
            {"role": "user", "content": self.user_prompt(input)},
        ]

        try:
            content = await self._llm.complete(
                messages,
                temperature=GENERATION_TEMPERATURE,
                json_mode=True,
            )
            result = parse_json_object(content)
        except LLMClientError as e:
            logger.error(f"Error generating preparation materials: {e}")
            result = JsonResult.fail(e)
        except Exception as e:
            logger.exception("Unexpected error generating preparation materials")
            result = JsonResult.fail(e)

        if not result.is_ok:
            logger.error(
                f"Falling back for '{input.event_title}' "
                f"({type(self).__name__}): {result.error}"
            )
        else:
            self._log_missing_fields(result.value or {})

        return result.unwrap_or_default(fallback_preparation())

    def _log_missing_fields(self, materials: dict[str, Any]) -> None:
        """Warn when the model omitted required fields.

        Does not raise or alter the output - generated materials are
        returned as produced.
        """
        required = [
            field.alias or name
            for name, field in self.output_model.model_fields.items()
            if field.is_required()
        ]
        missing = [key for key in required if key not in materials]
        if missing:
            logger.warning(
                f"{type(self).__name__} output missing fields: {missing}"
            )
