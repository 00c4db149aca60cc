"""Tests for ConnectionRepository."""

from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from src.db.turso import TursoClient
from src.models.connection import CalendarConnection
from src.repositories.connection_repo import ConnectionRepository


@pytest.fixture
async def db_client(tmp_path: Path):
    """Create a temp file database client for testing."""
    db_path = tmp_path / "test_connections.db"
    client = TursoClient(url=f"file:{db_path}")
    await client.connect()
    yield client
    await client.close()


@pytest.fixture
async def repo(db_client: TursoClient):
    """Create ConnectionRepository with initialized table."""
    repo = ConnectionRepository(db_client)
    await repo.initialize()
    return repo


def make_connection(**overrides) -> CalendarConnection:
    fields = {
        "user_id": "user-1",
        "provider": "google",
        "provider_email": "pat@example.com",
        "access_token": "access-1",
        "refresh_token": "refresh-1",
        "expires_at": datetime.now(UTC) + timedelta(hours=1),
    }
    fields.update(overrides)
    return CalendarConnection(**fields)


async def test_initialize_creates_table(db_client: TursoClient):
    """Initialize should create calendar_connections table."""
    repo = ConnectionRepository(db_client)
    await repo.initialize()

    result = await db_client.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='calendar_connections'"
    )
    assert len(result.rows) == 1


async def test_initialize_is_idempotent(repo: ConnectionRepository):
    await repo.initialize()


async def test_upsert_and_get(repo: ConnectionRepository):
    stored = await repo.upsert(make_connection())

    fetched = await repo.get("user-1", "google")

    assert fetched is not None
    assert fetched.id == stored.id
    assert fetched.provider_email == "pat@example.com"
    assert fetched.access_token == "access-1"
    assert fetched.refresh_token == "refresh-1"
    assert fetched.expires_at == stored.expires_at


async def test_get_missing_returns_none(repo: ConnectionRepository):
    assert await repo.get("nobody", "google") is None


async def test_reconnect_replaces_tokens_and_keeps_identity(repo: ConnectionRepository):
    first = await repo.upsert(make_connection())

    second = await repo.upsert(
        make_connection(access_token="access-2", refresh_token=None)
    )

    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.access_token == "access-2"
    assert second.refresh_token == "refresh-1"
    assert len(await repo.list_for_user("user-1")) == 1


async def test_list_for_user_newest_first(repo: ConnectionRepository):
    now = datetime.now(UTC)
    await repo.upsert(make_connection(provider="google", created_at=now - timedelta(days=1)))
    await repo.upsert(make_connection(provider="outlook", created_at=now))
    await repo.upsert(make_connection(user_id="user-2"))

    connections = await repo.list_for_user("user-1")

    assert [c.provider for c in connections] == ["outlook", "google"]


async def test_delete(repo: ConnectionRepository):
    await repo.upsert(make_connection())

    assert await repo.delete("user-1", "google") is True
    assert await repo.get("user-1", "google") is None
    assert await repo.delete("user-1", "google") is False


def test_is_expired():
    now = datetime(2024, 3, 20, 12, tzinfo=UTC)
    connection = make_connection(expires_at=now)

    assert connection.is_expired(now) is True
    assert connection.is_expired(now - timedelta(seconds=1)) is False
