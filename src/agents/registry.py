"""Agent registry mapping event types to preparation agents.

The registry is built once at startup by ``build_agent_registry`` and
handed to request handlers through ``app.state``.
"""

import logging

from src.agents.base import BaseAgent
from src.agents.business import BusinessAgent
from src.agents.default import DefaultAgent
from src.agents.fitness import FitnessAgent
from src.agents.health import HealthAgent
from src.agents.holiday import HolidayAgent
from src.agents.interview import InterviewAgent
from src.agents.learning import LearningAgent
from src.agents.presentation import PresentationAgent
from src.agents.schemas import PreparationInput
from src.agents.social import SocialAgent
from src.services.llm_client import CompletionClient

logger = logging.getLogger(__name__)

DEFAULT_AGENT_TYPE = "default"

# Agent class -> event types it serves
AGENT_TYPE_MAP: dict[type[BaseAgent], tuple[str, ...]] = {
    DefaultAgent: (DEFAULT_AGENT_TYPE,),
    InterviewAgent: ("interview",),
    SocialAgent: ("social",),
    LearningAgent: ("workshop", "learning", "training"),
    HolidayAgent: ("holiday", "celebration"),
    BusinessAgent: ("business", "client", "meeting"),
    PresentationAgent: ("presentation", "speech"),
    HealthAgent: ("health", "medical", "wellness"),
    FitnessAgent: ("fitness", "sports", "game", "match"),
}


class AgentNotFoundError(Exception):
    """Raised when no agent is registered for an event type."""

    def __init__(self, agent_type: str):
        self.agent_type = agent_type
        super().__init__(f"No agent found for type: {agent_type}")


class AgentRegistry:
    """Static lookup table from event type to agent."""

    def __init__(self) -> None:
        self._agents: dict[str, BaseAgent] = {}

    def register(self, agent_type: str, agent: BaseAgent) -> None:
        """Register an agent for a type, replacing any previous one."""
        self._agents[agent_type] = agent

    def get(self, agent_type: str) -> BaseAgent | None:
        return self._agents.get(agent_type)

    def agent_types(self) -> list[str]:
        return list(self._agents)

    async def generate_preparation(self, input: PreparationInput) -> dict:
        """Dispatch to the agent for ``input.event_type``.

        Args:
            input: Event details; a missing event type selects the default agent

        Returns:
            Preparation materials from the selected agent

        Raises:
            AgentNotFoundError: If the event type was never registered
        """
        agent_type = input.event_type or DEFAULT_AGENT_TYPE
        agent = self.get(agent_type)
        if agent is None:
            raise AgentNotFoundError(agent_type)

        logger.info(f"Using agent '{type(agent).__name__}' for type '{agent_type}'")
        return await agent.generate_preparation_materials(input)


def build_agent_registry(llm_client: CompletionClient) -> AgentRegistry:
    """Create a registry with every supported event type registered.

    Args:
        llm_client: Client shared by all agents

    Returns:
        Populated AgentRegistry
    """
    registry = AgentRegistry()
    for agent_cls, agent_types in AGENT_TYPE_MAP.items():
        agent = agent_cls(llm_client)
        for agent_type in agent_types:
            registry.register(agent_type, agent)
    return registry
