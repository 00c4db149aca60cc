"""Repository for stored calendar connections.

One row per (user_id, provider). Uses SQLite (via TursoClient) for
persistence.
"""

from datetime import datetime
from uuid import UUID

import structlog

from src.db.turso import TursoClient
from src.models.connection import CalendarConnection

logger = structlog.get_logger()

_COLUMNS = """
    id, user_id, provider, provider_email, access_token, refresh_token,
    expires_at, created_at, updated_at
"""


def _row_to_connection(row) -> CalendarConnection:
    return CalendarConnection(
        id=UUID(row[0]),
        user_id=row[1],
        provider=row[2],
        provider_email=row[3],
        access_token=row[4],
        refresh_token=row[5],
        expires_at=datetime.fromisoformat(row[6]),
        created_at=datetime.fromisoformat(row[7]),
        updated_at=datetime.fromisoformat(row[8]),
    )


class ConnectionRepository:
    """Repository for calendar provider connections."""

    def __init__(self, db_client: TursoClient):
        """Initialize repository with database client.

        Args:
            db_client: TursoClient instance for database operations
        """
        self._db = db_client

    async def initialize(self) -> None:
        """Create calendar_connections table if not exists."""
        await self._db.execute_batch(
            [
                """
            CREATE TABLE IF NOT EXISTS calendar_connections (
                id TEXT PRIMARY KEY,
                user_id TEXT NOT NULL,
                provider TEXT NOT NULL,
                provider_email TEXT,
                access_token TEXT NOT NULL,
                refresh_token TEXT,
                expires_at TEXT NOT NULL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                UNIQUE(user_id, provider)
            )
            """,
                """
            CREATE INDEX IF NOT EXISTS idx_connections_user
            ON calendar_connections(user_id, created_at)
            """,
            ]
        )

    async def upsert(self, connection: CalendarConnection) -> CalendarConnection:
        """Insert or replace the connection for (user_id, provider).

        A reconnect keeps the original id and created_at. A missing refresh
        token does not erase a previously stored one.

        Args:
            connection: Connection to store

        Returns:
            The stored connection as read back
        """
        connection.touch()
        await self._db.execute(
            """
            INSERT INTO calendar_connections
                (id, user_id, provider, provider_email, access_token,
                 refresh_token, expires_at, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(user_id, provider)
            DO UPDATE SET
                provider_email = excluded.provider_email,
                access_token = excluded.access_token,
                refresh_token = COALESCE(excluded.refresh_token, refresh_token),
                expires_at = excluded.expires_at,
                updated_at = excluded.updated_at
            """,
            [
                str(connection.id),
                connection.user_id,
                connection.provider,
                connection.provider_email,
                connection.access_token,
                connection.refresh_token,
                connection.expires_at.isoformat(),
                connection.created_at.isoformat(),
                connection.updated_at.isoformat(),
            ],
        )
        logger.info(
            "calendar connection stored",
            user_id=connection.user_id,
            provider=connection.provider,
        )
        stored = await self.get(connection.user_id, connection.provider)
        return stored or connection

    async def get(self, user_id: str, provider: str) -> CalendarConnection | None:
        """Get a user's connection for a provider, or None."""
        result = await self._db.execute(
            f"""
            SELECT {_COLUMNS}
            FROM calendar_connections
            WHERE user_id = ? AND provider = ?
            """,
            [user_id, provider],
        )
        if result.rows:
            return _row_to_connection(result.rows[0])
        return None

    async def list_for_user(self, user_id: str) -> list[CalendarConnection]:
        """All of a user's connections, newest first."""
        result = await self._db.execute(
            f"""
            SELECT {_COLUMNS}
            FROM calendar_connections
            WHERE user_id = ?
            ORDER BY created_at DESC
            """,
            [user_id],
        )
        return [_row_to_connection(row) for row in result.rows]

    async def delete(self, user_id: str, provider: str) -> bool:
        """Delete a connection.

        Returns:
            True if a connection was deleted, False if not found
        """
        result = await self._db.execute(
            """
            DELETE FROM calendar_connections
            WHERE user_id = ? AND provider = ?
            """,
            [user_id, provider],
        )
        return result.rows_affected > 0
