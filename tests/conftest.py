"""Pytest configuration and fixtures."""

from collections.abc import AsyncIterator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from src.db.turso import TursoClient
from src.main import _initialize_services, app
from src.repositories.connection_repo import ConnectionRepository


@pytest.fixture
async def client(tmp_path: Path) -> AsyncIterator[AsyncClient]:
    """Create async test client for the FastAPI app with a temp database."""
    db_path = tmp_path / "test_api.db"
    db = TursoClient(url=f"file:{db_path}")
    await db.connect()

    connection_repo = ConnectionRepository(db)
    await connection_repo.initialize()

    app.state.db = db
    app.state.connection_repo = connection_repo
    _initialize_services(app)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await db.close()
    del app.state.db
    del app.state.connection_repo
