"""Question business logic: ask, list, look up, aggregate. All calls are tenant scoped."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from question_api.db.models import Question
from question_api.errors import QuestionProcessingFailed
from question_api.llm.client import LLMClient
from question_api.llm.service import answer_question
from question_api.questions import repository
from question_api.questions.repository import Page

logger = logging.getLogger(__name__)


async def ask_question(
    session: AsyncSession,
    question: str,
    user_id: str,
    company_id: str,
    client: LLMClient | None = None,
) -> Question:
    """Get an answer from the AI provider and store the pair under the asker's company."""
    completion = await answer_question(question, client=client)

    try:
        row = await repository.create(session, question, completion.content, user_id, company_id)
        row = await repository.get_by_id(session, row.id, company_id)
    except SQLAlchemyError:
        logger.exception("Failed to store question for user %s", user_id)
        await session.rollback()
        raise QuestionProcessingFailed()

    logger.info(
        "Question processed and saved",
        extra={"user_id": user_id, "company_id": company_id, "action": "ask_question", "result": completion.model},
    )
    return row


async def get_user_questions(session: AsyncSession, user_id: str, company_id: str, page: int = 1, limit: int = 10) -> Page:
    return await repository.list_by_user(session, user_id, company_id, page, limit)


async def get_company_questions(session: AsyncSession, company_id: str, page: int = 1, limit: int = 10) -> Page:
    return await repository.list_by_company(session, company_id, page, limit)


async def get_question_by_id(session: AsyncSession, question_id: str, company_id: str) -> Question | None:
    return await repository.get_by_id(session, question_id, company_id)


async def get_question_stats(session: AsyncSession, company_id: str, days: int = 30) -> list[dict]:
    return await repository.daily_counts(session, company_id, days)


async def get_top_users(session: AsyncSession, company_id: str, limit: int = 10) -> list[dict]:
    return await repository.top_users(session, company_id, limit)
