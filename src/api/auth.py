"""Google OAuth connect flow, stored connections and logout.

- GET /auth/google: consent URL plus an ``oauth_state`` cookie
- GET /calendar/connect/google/callback: code exchange, store connection
- GET /calendar/connections: the user's connections
- DELETE /calendar/connections/{provider}: disconnect a provider
- POST /auth/logout: clear the session cookies

The callback runs in a popup and reports back to the opener window with
``postMessage``.
"""

import json
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse

from src.api.errors import error_response
from src.auth.oauth import (
    GoogleOAuthClient,
    OAuthError,
    build_authorization_url,
    generate_state,
)
from src.auth.session import (
    STATE_COOKIE,
    USER_COOKIE,
    clear_state_cookie,
    clear_tokens_cookie,
    clear_user_cookie,
    require_user_id,
    set_state_cookie,
    set_tokens_cookie,
    set_user_cookie,
)
from src.models.connection import CalendarConnection
from src.repositories.connection_repo import ConnectionRepository

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

GOOGLE_PROVIDER = "google"


def get_connection_repo(request: Request) -> ConnectionRepository:
    """Get ConnectionRepository from app state."""
    if not hasattr(request.app.state, "connection_repo"):
        raise HTTPException(status_code=503, detail="Connection store not initialized")
    return request.app.state.connection_repo


def get_oauth_client(request: Request) -> GoogleOAuthClient:
    """Get GoogleOAuthClient from app state."""
    if not hasattr(request.app.state, "oauth_client"):
        raise HTTPException(status_code=503, detail="OAuth client not initialized")
    return request.app.state.oauth_client


def popup_result(message: dict) -> HTMLResponse:
    """HTML page that posts ``message`` to the opener and closes itself."""
    payload = json.dumps(message).replace("</", "<\\/")
    html = (
        "<html><body><script>"
        f"window.opener.postMessage({payload}, '*');"
        "window.close();"
        "</script></body></html>"
    )
    return HTMLResponse(html)


def _popup_error(error: str, description: str | None = None) -> HTMLResponse:
    message = {"type": "oauth_error", "error": error}
    if description:
        message["description"] = description
    return popup_result(message)


@router.get("/auth/google")
async def start_google_auth():
    """Begin the Google connect flow."""
    state = generate_state()
    try:
        url = build_authorization_url(state)
    except OAuthError as e:
        logger.error(f"Invalid OAuth configuration: {e}")
        return error_response(500, "Invalid OAuth configuration", str(e))

    response = JSONResponse({"url": url})
    set_state_cookie(response, state)
    return response


@router.get("/calendar/connect/google/callback")
async def google_callback(
    request: Request,
    oauth: Annotated[GoogleOAuthClient, Depends(get_oauth_client)],
    repo: Annotated[ConnectionRepository, Depends(get_connection_repo)],
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
):
    """Finish the Google connect flow.

    On success the connection is stored, the session cookies are set and
    the opener receives ``{type: "oauth_success"}``.
    """
    stored_state = request.cookies.get(STATE_COOKIE)
    if not state or not stored_state or state != stored_state:
        logger.error("Invalid OAuth state parameter")
        return _popup_error("invalid_state")
    if error:
        logger.error(f"OAuth error: {error} {error_description or ''}")
        return _popup_error("oauth_failed", error_description or error)
    if not code:
        return _popup_error("no_code")

    try:
        tokens = await oauth.exchange_code(code)
        user_info = await oauth.fetch_user_info(tokens.access_token)
    except OAuthError as e:
        description = None
        if e.code == "token_exchange_failed":
            description = (
                "Failed to exchange authorization code. Please check server logs."
            )
        return _popup_error(e.code, description)

    user_id = request.cookies.get(USER_COOKIE) or user_info.id or user_info.email
    connection = CalendarConnection(
        user_id=user_id,
        provider=GOOGLE_PROVIDER,
        provider_email=user_info.email,
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_at=tokens.expires_at(),
    )
    try:
        await repo.upsert(connection)
    except Exception:
        logger.exception("Failed to store calendar connection")
        return _popup_error("token_storage_failed")

    logger.info(f"Google calendar connected for {user_info.email}")
    response = popup_result({"type": "oauth_success"})
    clear_state_cookie(response)
    set_tokens_cookie(response, tokens.access_token)
    set_user_cookie(response, user_id)
    return response


@router.get("/calendar/connections")
async def list_connections(
    user_id: Annotated[str, Depends(require_user_id)],
    repo: Annotated[ConnectionRepository, Depends(get_connection_repo)],
):
    """The user's calendar connections, newest first. Tokens are not returned."""
    connections = await repo.list_for_user(user_id)
    return {
        "connections": [
            {
                "provider": c.provider,
                "providerEmail": c.provider_email,
                "createdAt": c.created_at.isoformat(),
                "expiresAt": c.expires_at.isoformat(),
                "isExpired": c.is_expired(),
            }
            for c in connections
        ]
    }


@router.delete("/calendar/connections/{provider}")
async def delete_connection(
    provider: str,
    user_id: Annotated[str, Depends(require_user_id)],
    repo: Annotated[ConnectionRepository, Depends(get_connection_repo)],
):
    """Forget a stored provider connection."""
    deleted = await repo.delete(user_id, provider)
    if not deleted:
        return error_response(404, "Connection not found")
    return {"success": True}


@router.post("/auth/logout")
async def logout():
    """Clear the session cookies."""
    response = JSONResponse({"success": True})
    clear_tokens_cookie(response)
    clear_user_cookie(response)
    return response
