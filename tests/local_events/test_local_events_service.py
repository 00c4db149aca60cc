"""Tests for LocalEventsService."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.adapters.places_adapter import LocalEventsError
from src.config import settings
from src.local_events.service import LocalEventsService
from src.services.llm_client import LLMClientError

RESPONSE = """```json
{
  "events": [
    {
      "name": "Diwali Mela",
      "description": "Lights and food stalls",
      "location": "Fremont Central Park",
      "date": "2024-11-XX",
      "time": "17:00",
      "link": "https://example.com/mela"
    },
    {"description": "No name or venue"}
  ]
}
```"""


@pytest.fixture
def mock_llm():
    llm = MagicMock()
    llm.complete = AsyncMock(return_value=RESPONSE)
    return llm


async def test_parses_fenced_events(mock_llm):
    service = LocalEventsService(mock_llm)

    events = await service.find_events("Diwali", "Fremont, CA")

    assert len(events) == 2
    mela = events[0]
    assert mela.name == "Diwali Mela"
    assert mela.date == "2024-11-11"
    assert mela.source == "Perplexity Sonar"
    assert events[1].name == "Untitled Event"
    assert events[1].location == "Location TBA"


async def test_uses_local_events_model_and_location(mock_llm):
    service = LocalEventsService(mock_llm)

    await service.find_events("Holi", "Austin, TX")

    messages = mock_llm.complete.call_args.args[0]
    kwargs = mock_llm.complete.call_args.kwargs
    assert messages[0]["role"] == "system"
    assert "Holi events or celebrations in or near Austin, TX" in messages[1]["content"]
    assert kwargs["model"] == settings.local_events_model
    assert kwargs["json_mode"] is True
    assert kwargs["temperature"] == 0.5


async def test_defaults_location(mock_llm):
    service = LocalEventsService(mock_llm)

    await service.find_events("Holi")

    prompt = mock_llm.complete.call_args.args[0][1]["content"]
    assert settings.default_location in prompt


@pytest.mark.parametrize(
    "content",
    ["not json at all", '{"events": "none"}', '{"results": []}'],
)
async def test_unusable_response_returns_empty(mock_llm, content):
    mock_llm.complete.return_value = content
    service = LocalEventsService(mock_llm)

    assert await service.find_events("Holi", "Austin") == []


async def test_llm_failure_raises_local_events_error(mock_llm):
    mock_llm.complete.side_effect = LLMClientError("rate limited")
    service = LocalEventsService(mock_llm)

    with pytest.raises(LocalEventsError, match="rate limited"):
        await service.find_events("Holi", "Austin")


async def test_skips_events_with_non_string_fields(mock_llm):
    mock_llm.complete.return_value = (
        '{"events": ['
        '{"name": "Fireworks", "location": "Pier 39", "time": 1800},'
        '{"name": "Lantern Walk", "location": "Old Town", "time": "19:00"},'
        '"just a string"'
        "]}"
    )
    service = LocalEventsService(mock_llm)

    events = await service.find_events("New Year", "San Francisco")

    assert [e.name for e in events] == ["Lantern Walk"]
    assert events[0].time == "19:00"
