"""Business meeting agent (business, client and meeting event types)."""

from typing import Any

from src.agents.base import BaseAgent
from src.agents.schemas import BusinessPreparationOutput, PreparationInput


class BusinessAgent(BaseAgent):
    """Agent for business and client meetings."""

    template_name = "business.txt.j2"
    output_model = BusinessPreparationOutput

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        event_type = (input.event_type or "").lower()
        return {"is_client_meeting": "client" in event_type}

    def system_message(self) -> str:
        return (
            "You are a business strategy consultant that helps professionals "
            "prepare for important business meetings. Your suggestions should "
            "be strategic, professional, and focused on achieving business "
            "objectives. Help the user establish or maintain strong business "
            "relationships and drive successful outcomes."
        )
