"""Presentation and public speaking agent."""

from typing import Any

from src.agents.base import BaseAgent, role_matches
from src.agents.schemas import PreparationInput, PresentationPreparationOutput


class PresentationAgent(BaseAgent):
    """Agent for presentations, for presenters or audience members."""

    template_name = "presentation.txt.j2"
    output_model = PresentationPreparationOutput

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        return {
            "is_presenter": role_matches(
                input.user_role, "presenter", "speaker", "host"
            )
        }

    def system_message(self) -> str:
        return (
            "You are a public speaking and presentation expert. Your guidance "
            "helps people deliver or attend presentations effectively. "
            "Provide advice that is tailored to the user's role, focusing on "
            "engaging delivery techniques for presenters or effective "
            "learning strategies for audience members."
        )
