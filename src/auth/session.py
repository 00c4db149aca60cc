"""Cookie helpers for the calendar session.

The browser holds the Google access token in an httpOnly
``calendar_tokens`` cookie; the signed-in user's id lives in
``smartcal_user``. Both are opaque to the rest of the app.
"""

import json

from fastapi import HTTPException, Request, Response
from pydantic import BaseModel, ValidationError

from src.config import settings

TOKENS_COOKIE = "calendar_tokens"
USER_COOKIE = "smartcal_user"
STATE_COOKIE = "oauth_state"

TOKENS_MAX_AGE = 60 * 60 * 24 * 7  # 1 week
STATE_MAX_AGE = 60 * 10


class CalendarTokens(BaseModel):
    access_token: str


def read_tokens(request: Request) -> CalendarTokens | None:
    """Parse the tokens cookie, or None when absent or malformed."""
    raw = request.cookies.get(TOKENS_COOKIE)
    if not raw:
        return None
    try:
        return CalendarTokens.model_validate(json.loads(raw))
    except (ValueError, ValidationError):
        return None


def require_access_token(request: Request) -> str:
    """FastAPI dependency: the caller's access token or a 401."""
    tokens = read_tokens(request)
    if tokens is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return tokens.access_token


def require_user_id(request: Request) -> str:
    """FastAPI dependency: the signed-in user's id or a 401."""
    user_id = request.cookies.get(USER_COOKIE)
    if not user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return user_id


def set_tokens_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        TOKENS_COOKIE,
        CalendarTokens(access_token=access_token).model_dump_json(),
        max_age=TOKENS_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_tokens_cookie(response: Response) -> None:
    response.delete_cookie(TOKENS_COOKIE, path="/")


def set_state_cookie(response: Response, state: str) -> None:
    response.set_cookie(
        STATE_COOKIE,
        state,
        max_age=STATE_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_state_cookie(response: Response) -> None:
    response.delete_cookie(STATE_COOKIE, path="/")


def set_user_cookie(response: Response, user_id: str) -> None:
    response.set_cookie(
        USER_COOKIE,
        user_id,
        max_age=TOKENS_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


def clear_user_cookie(response: Response) -> None:
    response.delete_cookie(USER_COOKIE, path="/")
