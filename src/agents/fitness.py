"""Sports and fitness agent."""

from typing import Any

from src.agents.base import BaseAgent
from src.agents.schemas import FitnessPreparationOutput, PreparationInput

TEAM_SPORT_KEYWORDS = ("game", "match", "league")


class FitnessAgent(BaseAgent):
    """Agent for workouts and sporting events.

    Team sports (detected from the title) additionally request team info.
    Requested location details let the preparation endpoint attach a
    commute estimate.
    """

    template_name = "fitness.txt.j2"
    output_model = FitnessPreparationOutput

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        title = input.event_title.lower()
        return {
            "is_team_sport": any(word in title for word in TEAM_SPORT_KEYWORDS)
        }

    def system_message(self) -> str:
        return (
            "You are a fitness and sports preparation specialist that helps "
            "people prepare for athletic activities and sporting events. Your "
            "guidance is practical, safety-focused, and aimed at optimizing "
            "performance while preventing injury. Provide specific, "
            "actionable advice tailored to the type of activity while "
            "maintaining a supportive and encouraging tone."
        )
