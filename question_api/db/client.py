"""Async engine and per-request session management.

The engine and session factory live on ``app.state``; handlers receive an
``AsyncSession`` through the ``get_session`` dependency and pass it down to
services and repositories explicitly.
"""

import logging
from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from question_api.config.settings import get_settings
from question_api.db.models import Base

logger = logging.getLogger(__name__)


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def create_engine(url: str | None = None) -> AsyncEngine:
    settings = get_settings()
    url = url or settings.DATABASE_URL

    kwargs: dict = {"echo": settings.DATABASE_ECHO}
    if _is_sqlite(url):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(pool_size=10, max_overflow=10, pool_pre_ping=True)
    return create_async_engine(url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def init_database(app) -> None:
    """Create the engine and session factory on app startup."""
    engine = create_engine()
    await create_tables(engine)
    app.state.db_engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Database initialized (%s)", engine.url.get_backend_name())


async def close_database(app) -> None:
    engine: AsyncEngine | None = getattr(app.state, "db_engine", None)
    if engine is not None:
        await engine.dispose()
        logger.info("Database connections closed")
    app.state.db_engine = None
    app.state.session_factory = None


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request, committed on success, rolled back on error."""
    factory = getattr(request.app.state, "session_factory", None)
    if factory is None:
        raise RuntimeError("Database not initialized")
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
