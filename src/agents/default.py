"""General-purpose preparation agent, used when no event type is given."""

from src.agents.base import BaseAgent


class DefaultAgent(BaseAgent):
    """Meeting-or-event agent with the base field set."""

    template_name = "default.txt.j2"

    def system_message(self) -> str:
        return (
            "You are a helpful assistant that generates meeting preparation "
            "materials. Your responses should be professional, concise, and "
            "actionable."
        )
