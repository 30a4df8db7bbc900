"""Helpers shared by the endpoint tests."""

import uuid

PASSWORD = "SecureTestPass123"


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}@example.com"


def unique_company(prefix: str = "Company") -> str:
    return f"{prefix} {uuid.uuid4().hex[:8]}"


def register(client, company: str, email: str | None = None, password: str = PASSWORD, name: str = "Test User") -> dict:
    """Register a user and return the response data (user, company, tokens)."""
    resp = client.post(
        "/api/auth/register",
        json={"email": email or unique_email(), "password": password, "name": name, "companyName": company},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def bearer(data: dict) -> dict:
    return {"Authorization": f"Bearer {data['tokens']['accessToken']}"}


def ask(client, data: dict, question: str) -> dict:
    resp = client.post("/api/questions", json={"question": question}, headers=bearer(data))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
