"""Learning event agent (workshops, classes, training sessions)."""

from typing import Any

from src.agents.base import BaseAgent, role_matches
from src.agents.schemas import LearningPreparationOutput, PreparationInput


class LearningAgent(BaseAgent):
    """Agent for learning events, for instructors or learners."""

    template_name = "learning.txt.j2"
    output_model = LearningPreparationOutput

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        return {
            "is_instructor": role_matches(
                input.user_role, "instructor", "teacher", "presenter"
            )
        }

    def system_message(self) -> str:
        return (
            "You are an education specialist that helps prepare for learning "
            "events such as workshops, classes, or training sessions. Your "
            "suggestions should be educational, practical, and focused on "
            "maximizing learning outcomes. Provide insights that help with "
            "effective knowledge acquisition or teaching, depending on the "
            "user's role."
        )
