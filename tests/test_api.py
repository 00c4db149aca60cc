"""Tests for the assembled application."""

from datetime import UTC, datetime, timedelta

from httpx import AsyncClient

from src.auth.session import USER_COOKIE
from src.main import app
from src.models.connection import CalendarConnection


async def test_health_check(client: AsyncClient) -> None:
    """Test basic health check endpoint."""
    response = await client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert data["version"] == "0.1.0"


async def test_readiness(client: AsyncClient) -> None:
    """Readiness passes once the connection store answers."""
    response = await client.get("/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ready"
    assert data["checks"]["database"] == "ok"


async def test_preparation_requires_title(client: AsyncClient) -> None:
    response = await client.post("/preparation", json={"eventDescription": "no title"})

    assert response.status_code == 400
    assert response.json()["error"] == "Please provide Event Title"


async def test_classify_requires_title(client: AsyncClient) -> None:
    response = await client.post("/classify-event", json={})

    assert response.status_code == 400
    assert response.json() == {"error": "Event title is required"}


async def test_calendar_requires_session(client: AsyncClient) -> None:
    response = await client.get("/calendar/events")

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


async def test_chat_requires_session(client: AsyncClient) -> None:
    response = await client.post("/chat", json={"message": "Hi"})

    assert response.status_code == 401


async def test_connections_round_trip(client: AsyncClient) -> None:
    """Connections stored in the database are listed and deleted per user."""
    await app.state.connection_repo.upsert(
        CalendarConnection(
            user_id="user-1",
            provider_email="pat@example.com",
            access_token="secret",
            expires_at=datetime.now(UTC) + timedelta(hours=1),
        )
    )
    client.cookies.set(USER_COOKIE, "user-1")

    listed = await client.get("/calendar/connections")
    deleted = await client.delete("/calendar/connections/google")
    after = await client.get("/calendar/connections")

    assert [c["providerEmail"] for c in listed.json()["connections"]] == ["pat@example.com"]
    assert deleted.json() == {"success": True}
    assert after.json() == {"connections": []}
