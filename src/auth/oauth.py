"""Google OAuth 2.0 authorization-code flow.

Builds the consent URL, exchanges the returned code for tokens and
fetches the account's profile.
"""

import secrets
from datetime import UTC, datetime, timedelta
from typing import Any
from urllib.parse import urlencode

import httpx
import structlog
from pydantic import BaseModel

from src.config import settings

logger = structlog.get_logger()

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

CALLBACK_PATH = "/calendar/connect/google/callback"
CLIENT_ID_SUFFIX = ".apps.googleusercontent.com"

CONNECT_SCOPES = [
    "https://www.googleapis.com/auth/calendar.readonly",
    "https://www.googleapis.com/auth/calendar.events.readonly",
    "openid",
    "profile",
    "email",
]


class OAuthError(Exception):
    """Raised when the OAuth configuration or an exchange step fails.

    ``code`` is a short machine-readable reason reported to the opener window.
    """

    def __init__(self, code: str, message: str | None = None):
        self.code = code
        super().__init__(message or code)


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str | None = None
    expires_in: int = 3600
    token_type: str | None = None
    scope: str | None = None

    def expires_at(self, now: datetime | None = None) -> datetime:
        return (now or datetime.now(UTC)) + timedelta(seconds=self.expires_in)


class GoogleUserInfo(BaseModel):
    id: str | None = None
    email: str
    name: str | None = None
    picture: str | None = None


def generate_state() -> str:
    """Generate a random CSRF state token."""
    return secrets.token_urlsafe(16)


def redirect_uri() -> str:
    return f"{settings.app_url.rstrip('/')}{CALLBACK_PATH}"


def validated_client_id() -> str:
    """Return the configured client id.

    Raises:
        OAuthError: If it is missing or not a Google OAuth client id
    """
    client_id = (settings.google_client_id or "").strip()
    if not client_id or not client_id.endswith(CLIENT_ID_SUFFIX):
        raise OAuthError(
            "invalid_configuration",
            "Client ID must be a valid Google OAuth 2.0 client ID "
            f"ending with {CLIENT_ID_SUFFIX}",
        )
    return client_id


def build_authorization_url(state: str) -> str:
    """Google consent-screen URL requesting offline calendar access."""
    params = {
        "client_id": validated_client_id(),
        "redirect_uri": redirect_uri(),
        "response_type": "code",
        "scope": " ".join(CONNECT_SCOPES),
        "access_type": "offline",
        "state": state,
        "prompt": "consent",
        "include_granted_scopes": "true",
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


class GoogleOAuthClient:
    """Token exchange and profile lookup against Google's endpoints."""

    def __init__(self, http_client: httpx.AsyncClient | None = None):
        self._http = http_client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._http is not None:
            return await self._http.request(method, url, **kwargs)
        async with httpx.AsyncClient() as client:
            return await client.request(method, url, **kwargs)

    async def exchange_code(self, code: str) -> TokenResponse:
        """Exchange an authorization code for tokens.

        Raises:
            OAuthError: ``token_exchange_failed`` on any failure
        """
        try:
            response = await self._request(
                "POST",
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": settings.google_client_id or "",
                    "client_secret": settings.google_client_secret or "",
                    "redirect_uri": redirect_uri(),
                    "grant_type": "authorization_code",
                },
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            raise OAuthError("token_exchange_failed", str(e)) from e

        if response.status_code != 200:
            logger.error(
                "token exchange failed",
                status=response.status_code,
                redirect_uri=redirect_uri(),
                client_secret_present=bool(settings.google_client_secret),
            )
            raise OAuthError("token_exchange_failed")
        return TokenResponse.model_validate(response.json())

    async def fetch_user_info(self, access_token: str) -> GoogleUserInfo:
        """Fetch the profile of the account that granted access.

        Raises:
            OAuthError: ``user_info_failed`` on any failure
        """
        try:
            response = await self._request(
                "GET",
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as e:
            raise OAuthError("user_info_failed", str(e)) from e

        if response.status_code != 200:
            logger.error("user info request failed", status=response.status_code)
            raise OAuthError("user_info_failed")
        return GoogleUserInfo.model_validate(response.json())
