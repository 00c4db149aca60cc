"""Interview preparation agent."""

from typing import Any

from src.agents.base import BaseAgent, role_matches
from src.agents.schemas import InterviewPreparationOutput, PreparationInput


class InterviewAgent(BaseAgent):
    """Agent for interviews, from either side of the table."""

    template_name = "interview.txt.j2"
    output_model = InterviewPreparationOutput

    def prompt_context(self, input: PreparationInput) -> dict[str, Any]:
        # "interviewee" does not contain "interviewer"
        return {"is_interviewer": role_matches(input.user_role, "interviewer")}

    def system_message(self) -> str:
        return (
            "You are a career and interview specialist assistant that helps "
            "prepare for interviews. Your responses should be professional, "
            "insightful, and targeted to help the user succeed in their "
            "interview, whether they are the interviewer or interviewee."
        )
