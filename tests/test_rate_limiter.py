"""Tests for the sliding window rate limiter."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from question_api.config.settings import get_settings
from question_api.middleware.rate_limiter import RateLimiterMiddleware


@pytest.fixture
def limited_client(monkeypatch):
    settings = get_settings()
    monkeypatch.setattr(settings, "RATE_LIMIT_ENABLED", True)
    monkeypatch.setattr(settings, "RATE_LIMIT_AUTH", 2)
    monkeypatch.setattr(settings, "RATE_LIMIT_STANDARD", 3)

    app = FastAPI()
    app.add_middleware(RateLimiterMiddleware)

    @app.post("/api/auth/login")
    async def login():
        return {"ok": True}

    @app.get("/api/questions")
    async def questions():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"ok": True}

    return TestClient(app)


def test_auth_limit(limited_client):
    for _ in range(2):
        assert limited_client.post("/api/auth/login").status_code == 200

    resp = limited_client.post("/api/auth/login")
    assert resp.status_code == 429
    assert resp.json() == {
        "success": False,
        "error": "rate_limit",
        "message": "Too many authentication attempts, please try again later",
    }
    assert int(resp.headers["Retry-After"]) > 0


def test_standard_limit(limited_client):
    for _ in range(3):
        assert limited_client.get("/api/questions").status_code == 200
    resp = limited_client.get("/api/questions")
    assert resp.status_code == 429
    assert resp.json()["message"] == "Too many requests, please try again later"


def test_forwarded_header_ignored_by_default(limited_client):
    # Rotating the header does not buy a fresh window
    statuses = [
        limited_client.post("/api/auth/login", headers={"X-Forwarded-For": f"1.2.3.{i}"}).status_code
        for i in range(20)
    ]
    assert statuses[:2] == [200, 200]
    assert set(statuses[2:]) == {429}


def test_limits_are_per_client_behind_trusted_proxy(limited_client, monkeypatch):
    monkeypatch.setattr(get_settings(), "RATE_LIMIT_TRUST_FORWARDED", True)
    for _ in range(3):
        limited_client.get("/api/questions", headers={"X-Forwarded-For": "10.0.0.1"})
    assert limited_client.get("/api/questions", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 429
    assert limited_client.get("/api/questions", headers={"X-Forwarded-For": "10.0.0.2"}).status_code == 200


def test_health_is_exempt(limited_client):
    for _ in range(10):
        assert limited_client.get("/health").status_code == 200


def test_disabled(limited_client, monkeypatch):
    monkeypatch.setattr(get_settings(), "RATE_LIMIT_ENABLED", False)
    for _ in range(10):
        assert limited_client.get("/api/questions").status_code == 200
