"""Health appointment and wellness agent."""

from typing import Any

from src.agents.base import BaseAgent, role_matches
from src.agents.schemas import HealthPreparationOutput, PreparationInput


class HealthAgent(BaseAgent):
    """Agent for medical appointments and wellness events."""

    template_name = "health.txt.j2"
    output_model = HealthPreparationOutput

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        return {
            "is_provider": role_matches(
                input.user_role, "doctor", "provider", "therapist", "practitioner"
            )
        }

    def system_message(self) -> str:
        return (
            "You are a health preparation specialist that helps people "
            "prepare for medical appointments and wellness events. Your "
            "guidance is supportive, practical, and focused on health "
            "outcomes. Provide suggestions that help the user have productive "
            "health-related interactions while being mindful of medical "
            "privacy and avoiding specific medical advice. Focus on "
            "preparation strategies rather than diagnosing or treating "
            "conditions."
        )
