"""JWT token creation and verification."""

import secrets
import time
from datetime import datetime, timedelta, timezone

import jwt

from question_api.config.settings import get_settings

ACCESS = "access"
REFRESH = "refresh"


def build_claims(user_id: str, email: str, role: str, company_id: str) -> dict:
    return {"userId": user_id, "email": email, "role": role, "companyId": company_id}


def create_access_token(claims: dict) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        **claims,
        "type": ACCESS,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_refresh_token(claims: dict) -> tuple[str, datetime]:
    """Return the signed refresh token and its expiry.

    The ``jti`` combines the user id with the issuance time so that two tokens
    for the same user never collide as storage keys.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    payload = {
        **claims,
        "type": REFRESH,
        "iat": now,
        "exp": expires_at,
        "jti": f"{claims['userId']}-{time.time_ns()}-{secrets.token_hex(4)}",
    }
    return jwt.encode(payload, settings.JWT_REFRESH_SECRET, algorithm=settings.JWT_ALGORITHM), expires_at


def verify_access_token(token: str) -> dict:
    """Decode an access token. Raises jwt.InvalidTokenError (incl. expiry)."""
    settings = get_settings()
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


def verify_refresh_token(token: str) -> dict:
    """Decode a refresh token. Raises jwt.InvalidTokenError (incl. expiry)."""
    settings = get_settings()
    return jwt.decode(token, settings.JWT_REFRESH_SECRET, algorithms=[settings.JWT_ALGORITHM])
