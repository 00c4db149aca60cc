"""libSQL database client wrapper for the connection store."""

import logging
from typing import Any

from libsql_client import Client, ResultSet, create_client

from src.config import settings

logger = logging.getLogger(__name__)

LOCAL_DATABASE_URL = "file:smartcal.db"


class TursoClient:
    """Thin async wrapper over a libSQL client.

    Talks to a hosted libSQL database when a ``libsql://`` URL and auth token
    are configured, otherwise to a local SQLite file.
    """

    def __init__(
        self,
        url: str | None = None,
        auth_token: str | None = None,
    ):
        """Initialize client with connection parameters.

        Args:
            url: Database URL. Defaults to settings or a local file.
            auth_token: Auth token for hosted databases. Defaults to settings.
        """
        self.url = url or settings.turso_database_url or LOCAL_DATABASE_URL
        self.auth_token = auth_token or settings.turso_auth_token
        self._client: Client | None = None

    @property
    def is_remote(self) -> bool:
        return bool(self.auth_token) and self.url.startswith("libsql://")

    async def connect(self) -> None:
        """Open the connection (idempotent)."""
        if self._client is not None:
            return

        if self.is_remote:
            self._client = create_client(url=self.url, auth_token=self.auth_token)
        else:
            self._client = create_client(url=self.url)

        logger.info(f"Connected to database: {self.url}")

    def _require_client(self) -> Client:
        if self._client is None:
            msg = "Not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

    async def execute(
        self,
        sql: str,
        params: list[Any] | None = None,
    ) -> ResultSet:
        """Execute one SQL statement with ``?`` placeholders."""
        return await self._require_client().execute(sql, params or [])

    async def execute_batch(self, statements: list[str]) -> None:
        """Execute several statements in one batch (schema setup)."""
        await self._require_client().batch(statements)

    async def close(self) -> None:
        if self._client:
            await self._client.close()
            self._client = None
            logger.info("Database connection closed")

    async def is_healthy(self) -> bool:
        """Check that the connection answers a trivial query."""
        if not self._client:
            return False
        try:
            result = await self._client.execute("SELECT 1")
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False
        return len(result.rows) == 1
