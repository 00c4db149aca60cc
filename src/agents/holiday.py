"""Holiday and celebration agent."""

from typing import Any

from src.agents.base import BaseAgent, role_matches
from src.agents.schemas import HolidayPreparationOutput, PreparationInput


class HolidayAgent(BaseAgent):
    """Agent for holidays and celebrations, for hosts or guests."""

    template_name = "holiday.txt.j2"
    output_model = HolidayPreparationOutput

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        return {"is_host": role_matches(input.user_role, "host", "organizer")}

    def system_message(self) -> str:
        return (
            "You are a holiday and celebration expert that helps people "
            "prepare for festive occasions. Your suggestions should be "
            "festive, thoughtful, and culturally aware. Help the user create "
            "or participate in memorable holiday experiences while being "
            "mindful of traditions and customs associated with the specific "
            "holiday."
        )
