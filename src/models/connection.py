"""Stored calendar provider connection."""

from datetime import UTC, datetime

from pydantic import Field

from src.models.base import BaseEntity


class CalendarConnection(BaseEntity):
    """OAuth credentials a user granted for a calendar provider.

    One connection per (user_id, provider); reconnecting replaces it.
    """

    user_id: str = Field(description="Signed-in user's id")
    provider: str = Field(default="google")
    provider_email: str | None = Field(default=None)
    access_token: str
    refresh_token: str | None = None
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the access token has passed its expiry."""
        return (now or datetime.now(UTC)) >= self.expires_at
