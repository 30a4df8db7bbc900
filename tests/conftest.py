"""Shared test fixtures."""

import os
import tempfile

# Environment must be in place before the app (and its cached settings) is imported
_DB_DIR = tempfile.mkdtemp(prefix="question_api_tests_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/api.db"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["AI_PROVIDER"] = "mock"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from question_api.db.client import create_engine, create_session_factory, create_tables
from question_api.main import app

from helpers import register, unique_company


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def company_name():
    return unique_company()


@pytest.fixture
def admin(client, company_name):
    """First user of a fresh company (ADMIN)."""
    return register(client, company_name, name="Admin User")


@pytest.fixture
def member(client, company_name, admin):
    """Second user of the admin's company (USER)."""
    return register(client, company_name, name="Member User")


@pytest_asyncio.fixture
async def session(tmp_path):
    """A session on a throwaway SQLite database, for service-level tests."""
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path}/service.db")
    await create_tables(engine)
    factory = create_session_factory(engine)
    async with factory() as s:
        yield s
    await engine.dispose()
