"""Service-level tests for registration, login and the token lifecycle."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from pydantic import ValidationError
from sqlalchemy import select

from question_api.auth import repository, service, tokens
from question_api.config.settings import Settings, get_settings
from question_api.db.models import RefreshToken
from question_api.errors import (
    CompanyCreationConflict,
    DuplicateEmail,
    InvalidCredentials,
    InvalidRefreshToken,
    InvalidToken,
)

PASSWORD = "password123"


@pytest.mark.asyncio
async def test_first_user_admin_then_users(session):
    first = await service.register(session, "admin@techcorp.com", PASSWORD, "Admin", "TechCorp Inc.")
    second = await service.register(session, "user1@techcorp.com", PASSWORD, "John", "TechCorp Inc.")
    other = await service.register(session, "admin@startupxyz.com", PASSWORD, "Admin", "StartupXYZ")

    assert first.user.role == "ADMIN"
    assert second.user.role == "USER"
    assert second.company.id == first.company.id
    assert other.user.role == "ADMIN"
    assert other.company.id != first.company.id


@pytest.mark.asyncio
async def test_password_is_hashed(session):
    result = await service.register(session, "hash@example.com", PASSWORD, "Hash", "Hash Co")
    assert result.user.password != PASSWORD
    assert result.user.password.startswith("$2")


@pytest.mark.asyncio
async def test_duplicate_email(session):
    await service.register(session, "dup@example.com", PASSWORD, "Dup", "Dup Co")
    with pytest.raises(DuplicateEmail):
        await service.register(session, "dup@example.com", PASSWORD, "Dup2", "Another Co")


@pytest.mark.asyncio
async def test_email_race_is_reported_as_duplicate(session, monkeypatch):
    await service.register(session, "race@example.com", PASSWORD, "Race", "Race Co")
    await session.commit()

    # Simulate losing the race: the pre-check sees no user, the insert hits the unique constraint
    async def no_user(session, email):
        return None

    monkeypatch.setattr(repository, "get_user_by_email", no_user)
    with pytest.raises(DuplicateEmail):
        await service.register(session, "race@example.com", PASSWORD, "Race 2", "Race Co")


@pytest.mark.asyncio
async def test_company_race_is_reported_as_conflict(session, monkeypatch):
    await service.register(session, "first@newco.com", PASSWORD, "First", "NewCo")
    await session.commit()

    async def no_company(session, name):
        return None

    monkeypatch.setattr(repository, "get_company_by_name", no_company)
    with pytest.raises(CompanyCreationConflict):
        await service.register(session, "second@newco.com", PASSWORD, "Second", "NewCo")


@pytest.mark.asyncio
async def test_login(session):
    registered = await service.register(session, "login@example.com", PASSWORD, "Login", "Login Co")
    result = await service.login(session, "login@example.com", PASSWORD)
    assert result.user.id == registered.user.id
    assert result.company.name == "Login Co"


@pytest.mark.asyncio
async def test_login_failures_share_one_error(session):
    result = await service.register(session, "inactive@example.com", PASSWORD, "Inactive", "Inactive Co")

    errors = []
    for email, password in [("inactive@example.com", "wrong"), ("missing@example.com", PASSWORD)]:
        with pytest.raises(InvalidCredentials) as exc_info:
            await service.login(session, email, password)
        errors.append(str(exc_info.value))

    result.user.is_active = False
    await session.flush()
    with pytest.raises(InvalidCredentials) as exc_info:
        await service.login(session, "inactive@example.com", PASSWORD)
    errors.append(str(exc_info.value))

    assert len(set(errors)) == 1


@pytest.mark.asyncio
async def test_issued_refresh_token_is_stored(session):
    result = await service.register(session, "store@example.com", PASSWORD, "Store", "Store Co")
    stored = await repository.get_refresh_token(session, result.tokens.refresh_token)
    assert stored is not None
    assert stored.user_id == result.user.id


@pytest.mark.asyncio
async def test_token_claims(session):
    result = await service.register(session, "claims@example.com", PASSWORD, "Claims", "Claims Co")
    claims = tokens.verify_access(result.tokens.access_token)
    assert claims["userId"] == result.user.id
    assert claims["email"] == "claims@example.com"
    assert claims["role"] == "ADMIN"
    assert claims["companyId"] == result.company.id

    refresh_claims = jwt.decode(
        result.tokens.refresh_token, get_settings().JWT_REFRESH_SECRET, algorithms=["HS256"]
    )
    assert refresh_claims["jti"].startswith(result.user.id)
    assert "iat" in refresh_claims


@pytest.mark.asyncio
async def test_back_to_back_issues_do_not_collide(session):
    result = await service.register(session, "burst@example.com", PASSWORD, "Burst", "Burst Co")
    pairs = [await tokens.issue_token_pair(session, result.user, result.company.id) for _ in range(5)]
    assert len({p.refresh_token for p in pairs}) == 5


@pytest.mark.asyncio
async def test_refresh_deletes_consumed_token(session):
    result = await service.register(session, "rotate@example.com", PASSWORD, "Rotate", "Rotate Co")
    old = result.tokens.refresh_token

    new = await tokens.refresh(session, old)
    assert new.refresh_token != old
    assert await repository.get_refresh_token(session, old) is None
    assert await repository.get_refresh_token(session, new.refresh_token) is not None

    with pytest.raises(InvalidRefreshToken):
        await tokens.refresh(session, old)


@pytest.mark.asyncio
async def test_refresh_rejects_expired_stored_row(session):
    result = await service.register(session, "stale@example.com", PASSWORD, "Stale", "Stale Co")
    row = (await session.execute(
        select(RefreshToken).where(RefreshToken.token == result.tokens.refresh_token)
    )).scalar_one()
    row.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
    await session.flush()

    with pytest.raises(InvalidRefreshToken):
        await tokens.refresh(session, result.tokens.refresh_token)


@pytest.mark.asyncio
async def test_refresh_rejects_unsigned_or_foreign_tokens(session):
    with pytest.raises(InvalidRefreshToken):
        await tokens.refresh(session, "garbage")

    forged = jwt.encode({"userId": "x", "type": "refresh"}, "other-secret", algorithm="HS256")
    with pytest.raises(InvalidRefreshToken):
        await tokens.refresh(session, forged)


@pytest.mark.asyncio
async def test_revoke_and_logout_are_idempotent(session):
    result = await service.register(session, "bye@example.com", PASSWORD, "Bye", "Bye Co")
    await service.logout(session, result.tokens.refresh_token)
    await service.logout(session, result.tokens.refresh_token)
    await tokens.revoke(session, "never-issued")

    with pytest.raises(InvalidRefreshToken):
        await tokens.refresh(session, result.tokens.refresh_token)


@pytest.mark.asyncio
async def test_logout_swallows_store_errors(session, monkeypatch):
    async def broken(session, token):
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(tokens, "revoke", broken)
    assert await service.logout(session, "whatever") is None


def test_verify_access_rejects_expired_and_wrong_type():
    settings = get_settings()
    past = datetime.now(timezone.utc) - timedelta(minutes=5)
    expired = jwt.encode(
        {"userId": "u", "companyId": "c", "type": "access", "exp": past}, settings.JWT_SECRET, algorithm="HS256"
    )
    with pytest.raises(InvalidToken):
        tokens.verify_access(expired)

    wrong_type = jwt.encode({"userId": "u", "companyId": "c", "type": "refresh"}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(InvalidToken):
        tokens.verify_access(wrong_type)


def test_settings_require_signing_secrets(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    monkeypatch.delenv("JWT_REFRESH_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


@pytest.mark.parametrize("access, refresh", [("", "refresh-secret"), ("access-secret", ""), ("   ", "   ")])
def test_settings_reject_blank_signing_secrets(monkeypatch, access, refresh):
    monkeypatch.setenv("JWT_SECRET", access)
    monkeypatch.setenv("JWT_REFRESH_SECRET", refresh)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_accept_signing_secrets(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "access-secret")
    monkeypatch.setenv("JWT_REFRESH_SECRET", "refresh-secret")
    settings = Settings(_env_file=None)
    assert settings.JWT_SECRET == "access-secret"
