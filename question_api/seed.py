"""Seed the database with two demo companies, their users and sample questions.

Usage::

    python -m question_api.seed

Rows that already exist (matched by company name or user email) are left alone.
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from question_api.auth import repository
from question_api.auth.service import hash_password
from question_api.config.logging import configure_logging
from question_api.db.client import create_engine, create_session_factory, create_tables
from question_api.db.models import ROLE_ADMIN, ROLE_USER, Company, Question, User

logger = logging.getLogger("question_api.seed")

DEMO_PASSWORD = "123456"

COMPANIES = ["TechCorp Inc.", "StartupXYZ"]

USERS = [
    ("admin@techcorp.com", "Admin TechCorp", ROLE_ADMIN, "TechCorp Inc."),
    ("user1@techcorp.com", "John Doe", ROLE_USER, "TechCorp Inc."),
    ("admin@startupxyz.com", "Admin StartupXYZ", ROLE_ADMIN, "StartupXYZ"),
    ("user2@startupxyz.com", "Jane Smith", ROLE_USER, "StartupXYZ"),
]

QUESTIONS = [
    (
        "user1@techcorp.com",
        "What is artificial intelligence?",
        "Artificial Intelligence (AI) refers to the simulation of human intelligence in machines "
        "that are programmed to think and learn like humans.",
    ),
    (
        "user2@startupxyz.com",
        "How does machine learning work?",
        "Machine learning is a subset of AI that enables computers to learn and improve from "
        "experience without being explicitly programmed.",
    ),
]


async def seed(session: AsyncSession) -> None:
    companies: dict[str, Company] = {}
    for name in COMPANIES:
        companies[name] = await repository.get_company_by_name(session, name) or await repository.create_company(session, name)

    password_hash = hash_password(DEMO_PASSWORD)
    users: dict[str, User] = {}
    for email, name, role, company_name in USERS:
        user = await repository.get_user_by_email(session, email)
        if user is None:
            user = await repository.create_user(session, email, password_hash, name, role, companies[company_name])
        users[email] = user

    for email, text, answer in QUESTIONS:
        user = users[email]
        existing = await session.execute(
            select(Question.id).where(Question.user_id == user.id, Question.question == text)
        )
        if existing.first() is None:
            session.add(Question(question=text, answer=answer, user_id=user.id, company_id=user.company_id))

    await session.commit()


async def main() -> None:
    configure_logging()
    engine = create_engine()
    try:
        await create_tables(engine)
        async with create_session_factory(engine)() as session:
            await seed(session)
    finally:
        await engine.dispose()

    logger.info("Seed completed. Demo password for every user: %s", DEMO_PASSWORD)
    for email, _, role, company_name in USERS:
        logger.info("  %s (%s, %s)", email, role, company_name)


if __name__ == "__main__":
    asyncio.run(main())
