"""Tests for the single event endpoint."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.calendar_adapter import CalendarAPIError
from src.api.errors import register_error_handlers
from src.api.events import router, to_event_details
from src.auth.session import TOKENS_COOKIE

TIMED = {
    "id": "evt1",
    "title": "Design review",
    "description": "Walk through mocks",
    "start": "2024-03-20T14:00:00-04:00",
    "end": "2024-03-20T15:30:00-04:00",
    "isAllDay": False,
    "location": "",
    "attendees": ["alice@example.com"],
}


@pytest.fixture
def adapter():
    adapter = MagicMock()
    adapter.get_event = AsyncMock(return_value=TIMED)
    return adapter


@pytest.fixture
def client(adapter):
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(router)
    app.state.calendar_adapter_factory = lambda token: adapter
    client = TestClient(app)
    client.cookies.set(TOKENS_COOKIE, json.dumps({"access_token": "tok"}))
    return client


class TestToEventDetails:
    def test_timed_event(self):
        details = to_event_details(TIMED)

        assert details["date"] == "Wednesday, March 20, 2024"
        assert details["time"] == "2:00 PM - 3:30 PM"
        assert details["location"] == "No location specified"
        assert details["resources"] == []
        assert details["questions"] == []

    def test_all_day_event(self):
        details = to_event_details(
            {"id": "hol", "start": "2024-12-25", "end": "2024-12-26", "isAllDay": True}
        )

        assert details["date"] == "2024-12-25"
        assert details["time"] == "All day"
        assert details["title"] == "Untitled Event"
        assert details["attendees"] == []


class TestGetEvent:
    def test_returns_details(self, client, adapter):
        response = client.get("/events/evt1")

        assert response.status_code == 200
        assert response.json()["title"] == "Design review"
        adapter.get_event.assert_awaited_once_with("evt1")

    def test_not_found(self, client, adapter):
        adapter.get_event.return_value = None

        response = client.get("/events/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}

    def test_api_failure(self, client, adapter):
        adapter.get_event.side_effect = CalendarAPIError("boom")

        response = client.get("/events/evt1")

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch event"}

    def test_requires_cookie(self, client):
        client.cookies.clear()

        assert client.get("/events/evt1").status_code == 401
