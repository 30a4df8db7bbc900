"""Data access layer for companies, users and refresh tokens."""

from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from question_api.db.models import Company, RefreshToken, User


async def get_company_by_name(session: AsyncSession, name: str) -> Company | None:
    result = await session.execute(select(Company).where(Company.name == name))
    return result.scalar_one_or_none()


async def create_company(session: AsyncSession, name: str) -> Company:
    company = Company(name=name)
    session.add(company)
    await session.flush()
    return company


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(
        select(User).options(joinedload(User.company)).where(User.email == email)
    )
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: str) -> User | None:
    result = await session.execute(
        select(User).options(joinedload(User.company)).where(User.id == user_id)
    )
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    email: str,
    password_hash: str,
    name: str,
    role: str,
    company: Company,
) -> User:
    user = User(
        email=email,
        password=password_hash,
        name=name,
        role=role,
        company_id=company.id,
        company=company,
    )
    session.add(user)
    await session.flush()
    return user


async def store_refresh_token(session: AsyncSession, token: str, user_id: str, expires_at: datetime) -> RefreshToken:
    row = RefreshToken(token=token, user_id=user_id, expires_at=expires_at)
    session.add(row)
    await session.flush()
    return row


async def get_refresh_token(session: AsyncSession, token: str) -> RefreshToken | None:
    result = await session.execute(select(RefreshToken).where(RefreshToken.token == token))
    return result.scalar_one_or_none()


async def delete_refresh_token(session: AsyncSession, token: str) -> int:
    """Delete a stored refresh token; returns the number of rows removed (0 or 1)."""
    result = await session.execute(
        delete(RefreshToken).where(RefreshToken.token == token).execution_options(synchronize_session=False)
    )
    return result.rowcount or 0
