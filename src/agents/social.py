"""Social event agent."""

from src.agents.base import BaseAgent
from src.agents.schemas import SocialPreparationOutput


class SocialAgent(BaseAgent):
    """Agent for parties, dinners and other gatherings."""

    template_name = "social.txt.j2"
    output_model = SocialPreparationOutput

    def system_message(self) -> str:
        return (
            "You are a social engagement expert who helps people prepare for "
            "social events. Your suggestions should be warm, friendly, and "
            "help the user build connections and enjoy their social "
            "experience. Focus on making the user feel comfortable and "
            "confident in social settings."
        )
