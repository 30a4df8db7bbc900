"""Registration (tenant create-or-join), login and logout."""

import logging
from dataclasses import dataclass

import bcrypt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from question_api.auth import repository, tokens
from question_api.auth.tokens import TokenPair
from question_api.config.settings import get_settings
from question_api.db.models import ROLE_ADMIN, ROLE_USER, Company, User
from question_api.errors import CompanyCreationConflict, DuplicateEmail, InvalidCredentials

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: User
    company: Company
    tokens: TokenPair


def hash_password(password: str) -> str:
    rounds = get_settings().BCRYPT_ROUNDS
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def check_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


async def register(
    session: AsyncSession,
    email: str,
    password: str,
    name: str,
    company_name: str,
) -> AuthResult:
    if await repository.get_user_by_email(session, email):
        raise DuplicateEmail()

    company = await repository.get_company_by_name(session, company_name)
    role = ROLE_USER
    if company is None:
        try:
            company = await repository.create_company(session, company_name)
        except IntegrityError:
            await session.rollback()
            logger.warning("Company creation lost a race: %s", company_name)
            raise CompanyCreationConflict()
        role = ROLE_ADMIN  # First user of a company becomes its admin

    password_hash = hash_password(password)

    try:
        user = await repository.create_user(session, email, password_hash, name, role, company)
    except IntegrityError:
        await session.rollback()
        raise DuplicateEmail()

    token_pair = await tokens.issue_token_pair(session, user, company.id)

    logger.info(
        "User registered",
        extra={"user_id": user.id, "company_id": company.id, "action": "register", "result": "success"},
    )
    return AuthResult(user=user, company=company, tokens=token_pair)


async def login(session: AsyncSession, email: str, password: str) -> AuthResult:
    user = await repository.get_user_by_email(session, email)

    # Unknown and inactive users fail exactly like a wrong password
    if user is None or not user.is_active:
        logger.warning("Login failed", extra={"action": "login", "result": "failure"})
        raise InvalidCredentials()

    if not check_password(password, user.password):
        logger.warning("Login failed", extra={"user_id": user.id, "action": "login", "result": "failure"})
        raise InvalidCredentials()

    token_pair = await tokens.issue_token_pair(session, user, user.company_id)

    logger.info(
        "User logged in",
        extra={"user_id": user.id, "company_id": user.company_id, "action": "login", "result": "success"},
    )
    return AuthResult(user=user, company=user.company, tokens=token_pair)


async def logout(session: AsyncSession, refresh_token: str) -> None:
    """Revoke a refresh token. Never fails from the caller's point of view."""
    try:
        await tokens.revoke(session, refresh_token)
    except Exception:
        logger.exception("Logout revoke failed; reporting success")
        await session.rollback()
