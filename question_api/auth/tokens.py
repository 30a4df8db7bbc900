"""Token issuance, verification, single-use refresh rotation and revocation."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import jwt as pyjwt
from sqlalchemy.ext.asyncio import AsyncSession

from question_api.auth import repository
from question_api.auth.jwt import (
    ACCESS,
    REFRESH,
    build_claims,
    create_access_token,
    create_refresh_token,
    verify_access_token,
    verify_refresh_token,
)
from question_api.db.models import User, as_utc
from question_api.errors import InvalidRefreshToken, InvalidToken

logger = logging.getLogger(__name__)


@dataclass
class TokenPair:
    access_token: str
    refresh_token: str


async def issue_token_pair(session: AsyncSession, user: User, company_id: str) -> TokenPair:
    claims = build_claims(user.id, user.email, user.role, company_id)
    access_token = create_access_token(claims)
    refresh_token, expires_at = create_refresh_token(claims)
    await repository.store_refresh_token(session, refresh_token, user.id, expires_at)
    return TokenPair(access_token=access_token, refresh_token=refresh_token)


def verify_access(token: str) -> dict:
    try:
        claims = verify_access_token(token)
    except pyjwt.InvalidTokenError:
        raise InvalidToken()
    if claims.get("type") != ACCESS:
        raise InvalidToken()
    return claims


async def refresh(session: AsyncSession, refresh_token: str) -> TokenPair:
    """Exchange a refresh token for a new pair. The consumed token is deleted."""
    try:
        claims = verify_refresh_token(refresh_token)
    except pyjwt.InvalidTokenError:
        logger.warning("Refresh rejected: bad signature or expired")
        raise InvalidRefreshToken()
    if claims.get("type") != REFRESH:
        raise InvalidRefreshToken()

    stored = await repository.get_refresh_token(session, refresh_token)
    if stored is None or as_utc(stored.expires_at) < datetime.now(timezone.utc):
        logger.warning("Refresh rejected: token not stored or expired", extra={"user_id": claims.get("userId")})
        raise InvalidRefreshToken()

    # Conditional delete: only one caller can consume a given token
    if await repository.delete_refresh_token(session, refresh_token) != 1:
        raise InvalidRefreshToken()

    user = await repository.get_user_by_id(session, stored.user_id)
    if user is None:
        raise InvalidRefreshToken()

    return await issue_token_pair(session, user, user.company_id)


async def revoke(session: AsyncSession, refresh_token: str) -> None:
    await repository.delete_refresh_token(session, refresh_token)
