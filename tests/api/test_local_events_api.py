"""Tests for nearby event endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.adapters.places_adapter import LocalEventsError
from src.agents.schemas import LocalEvent
from src.api.errors import register_error_handlers
from src.api.local_events import router

PLACE = LocalEvent(
    name="Temple",
    location="1 Main St",
    source="Google Places",
    rating=4.7,
    distance="1.2 km",
)


@pytest.fixture
def places():
    places = MagicMock()
    places.find_local_events = AsyncMock(return_value=[PLACE])
    return places


@pytest.fixture
def search():
    search = MagicMock()
    search.find_events = AsyncMock(
        return_value=[LocalEvent(name="Mela", location="Park", source="Perplexity Sonar")]
    )
    return search


@pytest.fixture
def app(places, search):
    test_app = FastAPI()
    register_error_handlers(test_app)
    test_app.include_router(router)
    test_app.state.places_adapter = places
    test_app.state.local_events_service = search
    return test_app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestLocalEvents:
    def test_returns_places(self, client, places):
        response = client.post(
            "/local-events",
            json={"eventType": "holiday", "location": "Fremont", "date": "2024-11-01"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "events": [
                {
                    "name": "Temple",
                    "location": "1 Main St",
                    "source": "Google Places",
                    "rating": 4.7,
                    "distance": "1.2 km",
                }
            ]
        }
        places.find_local_events.assert_awaited_once_with(
            "holiday", "Fremont", "2024-11-01", 5000
        )

    def test_failure_is_500_with_message(self, client, places):
        places.find_local_events.side_effect = LocalEventsError("Could not geocode location")

        response = client.post("/local-events", json={"eventType": "holiday"})

        assert response.status_code == 500
        assert response.json() == {"error": "Could not geocode location"}

    def test_adapter_missing_is_503(self, app, client):
        del app.state.places_adapter

        response = client.post("/local-events", json={"eventType": "holiday"})

        assert response.status_code == 503


class TestPerplexityEvents:
    def test_returns_events(self, client, search):
        response = client.post(
            "/perplexity-events", json={"eventType": "Diwali", "location": "Fremont"}
        )

        assert response.json() == {
            "events": [{"name": "Mela", "location": "Park", "source": "Perplexity Sonar"}]
        }
        search.find_events.assert_awaited_once_with("Diwali", "Fremont")

    def test_failure_is_500(self, client, search):
        search.find_events.side_effect = LocalEventsError("rate limited")

        response = client.post("/perplexity-events", json={"eventType": "Diwali"})

        assert response.status_code == 500
        assert response.json() == {"error": "rate limited"}
