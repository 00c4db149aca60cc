"""Event preparation agents.

One agent per event family, each with its own persona and prompt:
- DefaultAgent: general meetings and events
- BusinessAgent, InterviewAgent, PresentationAgent: professional events
- SocialAgent, HolidayAgent: gatherings and celebrations
- LearningAgent, HealthAgent, FitnessAgent: personal development and wellbeing
"""

from src.agents.base import BaseAgent
from src.agents.registry import (
    AgentNotFoundError,
    AgentRegistry,
    build_agent_registry,
)
from src.agents.schemas import (
    PreparationInput,
    PreparationOutput,
    fallback_preparation,
)

__all__ = [
    "AgentNotFoundError",
    "AgentRegistry",
    "BaseAgent",
    "PreparationInput",
    "PreparationOutput",
    "build_agent_registry",
    "fallback_preparation",
]
