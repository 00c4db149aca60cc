"""Tests for preparation agents and their prompts."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.agents.business import BusinessAgent
from src.agents.default import DefaultAgent
from src.agents.fitness import FitnessAgent
from src.agents.health import HealthAgent
from src.agents.holiday import HolidayAgent
from src.agents.interview import InterviewAgent
from src.agents.learning import LearningAgent
from src.agents.presentation import PresentationAgent
from src.agents.schemas import PreparationInput, fallback_preparation
from src.agents.social import SocialAgent
from src.services.llm_client import LLMClientError

ALL_AGENTS = [
    DefaultAgent,
    BusinessAgent,
    InterviewAgent,
    SocialAgent,
    LearningAgent,
    HolidayAgent,
    PresentationAgent,
    HealthAgent,
    FitnessAgent,
]


@pytest.fixture
def mock_llm():
    llm = MagicMock()
    llm.complete = AsyncMock(
        return_value=json.dumps(
            {
                "summary": "Quarterly planning",
                "keyPoints": ["Budget"],
                "suggestedApproach": "Lead with numbers",
                "questions": ["What changed?"],
                "relevantTopics": ["Hiring"],
                "customField": "kept",
            }
        )
    )
    return llm


@pytest.fixture
def event():
    return PreparationInput(
        event_title="Q3 Planning",
        event_description="Plan the quarter",
        event_date="March 20, 2024",
        event_time="2:00 PM - 3:00 PM",
        attendees=["alice@example.com", "bob@example.com"],
    )


class TestUserPrompt:
    """Prompt rendering for every agent."""

    @pytest.mark.parametrize("agent_cls", ALL_AGENTS)
    def test_includes_event_fields_and_json_instruction(self, agent_cls, event):
        prompt = agent_cls(MagicMock()).user_prompt(event)

        assert "Q3 Planning" in prompt
        assert "Plan the quarter" in prompt
        assert "March 20, 2024" in prompt
        assert "2:00 PM - 3:00 PM" in prompt
        assert "alice@example.com, bob@example.com" in prompt
        assert "single JSON object" in prompt
        assert '"summary": "string"' in prompt

    @pytest.mark.parametrize("agent_cls", ALL_AGENTS)
    def test_system_message_is_fixed_text(self, agent_cls):
        agent = agent_cls(MagicMock())
        assert agent.system_message()
        assert agent.system_message() == agent.system_message()

    def test_interview_role_variants(self, event):
        agent = InterviewAgent(MagicMock())

        interviewer = agent.user_prompt(event.model_copy(update={"user_role": "Interviewer"}))
        interviewee = agent.user_prompt(event.model_copy(update={"user_role": "interviewee"}))

        assert '"evaluationCriteria"' in interviewer
        assert '"relevantExperiencePoints"' not in interviewer
        assert '"relevantExperiencePoints"' in interviewee
        assert '"evaluationCriteria"' not in interviewee

    def test_business_client_meeting(self, event):
        agent = BusinessAgent(MagicMock())

        prompt = agent.user_prompt(event.model_copy(update={"event_type": "client"}))

        assert "with a client" in prompt
        assert "handling this client interaction" in prompt

    def test_business_previous_notes(self, event):
        agent = BusinessAgent(MagicMock())

        prompt = agent.user_prompt(
            event.model_copy(update={"previous_meeting_notes": "Agreed on pricing"})
        )

        assert "Previous Meeting Notes: Agreed on pricing" in prompt

    def test_fitness_team_sport_from_title(self, event):
        agent = FitnessAgent(MagicMock())

        game = agent.user_prompt(event.model_copy(update={"event_title": "Soccer Match"}))
        run = agent.user_prompt(event.model_copy(update={"event_title": "Morning Run"}))

        assert '"teamInfo"' in game
        assert '"teamInfo"' not in run
        assert '"locationDetails"' in run


class TestGeneratePreparationMaterials:
    """One completion call, parsed output or fallback."""

    async def test_returns_parsed_output_as_is(self, mock_llm, event):
        agent = DefaultAgent(mock_llm)

        result = await agent.generate_preparation_materials(event)

        assert result["summary"] == "Quarterly planning"
        assert result["customField"] == "kept"
        mock_llm.complete.assert_awaited_once()

    async def test_uses_json_mode_and_temperature(self, mock_llm, event):
        agent = SocialAgent(mock_llm)

        await agent.generate_preparation_materials(event)

        messages = mock_llm.complete.call_args.args[0]
        kwargs = mock_llm.complete.call_args.kwargs
        assert messages[0]["role"] == "system"
        assert messages[1]["role"] == "user"
        assert kwargs["temperature"] == 0.7
        assert kwargs["json_mode"] is True

    async def test_client_error_returns_fallback(self, mock_llm, event):
        mock_llm.complete.side_effect = LLMClientError("network down")
        agent = DefaultAgent(mock_llm)

        result = await agent.generate_preparation_materials(event)

        assert result == fallback_preparation()
        assert mock_llm.complete.await_count == 1

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", "{broken"])
    async def test_unparseable_output_returns_fallback(self, mock_llm, event, content):
        mock_llm.complete.return_value = content
        agent = HealthAgent(mock_llm)

        result = await agent.generate_preparation_materials(event)

        assert result["summary"] == "Failed to generate summary. Please try again later."
        assert result["keyPoints"] == ["Error generating key points"]
        assert result["actionItems"] == ["Error generating action items"]

    async def test_missing_fields_are_not_filled(self, mock_llm, event):
        mock_llm.complete.return_value = '{"summary": "only this"}'
        agent = InterviewAgent(mock_llm)

        result = await agent.generate_preparation_materials(event)

        assert result == {"summary": "only this"}


class TestFallbackPreparation:
    def test_fallback_is_fresh_copy(self):
        first = fallback_preparation()
        first["keyPoints"].append("mutated")

        assert fallback_preparation()["keyPoints"] == ["Error generating key points"]

    def test_fallback_wire_names(self):
        assert set(fallback_preparation()) == {
            "summary",
            "keyPoints",
            "suggestedApproach",
            "questions",
            "relevantTopics",
            "actionItems",
        }
