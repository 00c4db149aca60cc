"""Tests for session cookie helpers."""

import json

import pytest
from fastapi import Depends, FastAPI, Response
from fastapi.testclient import TestClient

from src.api.errors import register_error_handlers
from src.auth.session import (
    TOKENS_COOKIE,
    USER_COOKIE,
    clear_tokens_cookie,
    require_access_token,
    require_user_id,
    set_tokens_cookie,
)


@pytest.fixture
def client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/token")
    def token(access_token: str = Depends(require_access_token)):
        return {"token": access_token}

    @app.get("/user")
    def user(user_id: str = Depends(require_user_id)):
        return {"user": user_id}

    @app.post("/login")
    def login(response: Response):
        set_tokens_cookie(response, "abc")
        return {}

    @app.post("/logout")
    def logout(response: Response):
        clear_tokens_cookie(response)
        return {}

    return TestClient(app)


class TestRequireAccessToken:
    def test_reads_token_cookie(self, client):
        client.cookies.set(TOKENS_COOKIE, json.dumps({"access_token": "abc"}))

        response = client.get("/token")

        assert response.json() == {"token": "abc"}

    def test_missing_cookie_is_401(self, client):
        response = client.get("/token")

        assert response.status_code == 401
        assert response.json() == {"error": "Not authenticated"}

    def test_malformed_cookie_is_401(self, client):
        client.cookies.set(TOKENS_COOKIE, "not-json")

        assert client.get("/token").status_code == 401


class TestRequireUserId:
    def test_reads_user_cookie(self, client):
        client.cookies.set(USER_COOKIE, "user-1")

        assert client.get("/user").json() == {"user": "user-1"}

    def test_missing_user_is_401(self, client):
        response = client.get("/user")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}


class TestTokenCookie:
    def test_set_cookie_is_http_only(self, client):
        response = client.post("/login")

        header = response.headers["set-cookie"]
        assert header.startswith(f"{TOKENS_COOKIE}=")
        assert "HttpOnly" in header
        assert "SameSite=lax" in header
        assert "Max-Age=604800" in header

    def test_clear_cookie_expires_it(self, client):
        response = client.post("/logout")

        header = response.headers["set-cookie"]
        assert header.startswith(f"{TOKENS_COOKIE}=")
        assert "Max-Age=0" in header
