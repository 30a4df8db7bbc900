"""Data access layer for questions. Every read is scoped to a company.

Paginated reads count and fetch in two separate statements without a
surrounding transaction, so ``total`` may drift from the page contents under
concurrent inserts. That is acceptable for listing screens.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from question_api.db.models import Question, User


@dataclass
class Page:
    items: list[Question]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0


async def create(session: AsyncSession, question: str, answer: str, user_id: str, company_id: str) -> Question:
    row = Question(question=question, answer=answer, user_id=user_id, company_id=company_id)
    session.add(row)
    await session.flush()
    return row


async def _paginate(session: AsyncSession, conditions: list[Any], page: int, limit: int) -> Page:
    offset = (page - 1) * limit

    # Get total count
    count_result = await session.execute(select(func.count(Question.id)).where(*conditions))
    total = count_result.scalar_one()

    # Past the last page; also keeps huge offsets out of the query
    if offset >= total:
        return Page(items=[], page=page, limit=limit, total=total)

    # Get page
    result = await session.execute(
        select(Question)
        .options(joinedload(Question.user))
        .where(*conditions)
        .order_by(Question.created_at.desc(), Question.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return Page(items=list(result.scalars().all()), page=page, limit=limit, total=total)


async def list_by_user(session: AsyncSession, user_id: str, company_id: str, page: int = 1, limit: int = 10) -> Page:
    return await _paginate(session, [Question.user_id == user_id, Question.company_id == company_id], page, limit)


async def list_by_company(session: AsyncSession, company_id: str, page: int = 1, limit: int = 10) -> Page:
    return await _paginate(session, [Question.company_id == company_id], page, limit)


async def get_by_id(session: AsyncSession, question_id: str, company_id: str) -> Question | None:
    """Return the question only when it belongs to ``company_id``; otherwise None."""
    result = await session.execute(
        select(Question)
        .options(joinedload(Question.user))
        .where(Question.id == question_id, Question.company_id == company_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def daily_counts(session: AsyncSession, company_id: str, days: int = 30) -> list[dict]:
    since = datetime.now(timezone.utc) - timedelta(days=days)
    day = func.date(Question.created_at).label("date")
    result = await session.execute(
        select(day, func.count(Question.id).label("count"))
        .where(Question.company_id == company_id, Question.created_at >= since)
        .group_by(day)
        .order_by(desc("date"))
    )
    return [{"date": str(row.date), "count": row.count} for row in result]


async def top_users(session: AsyncSession, company_id: str, limit: int = 10) -> list[dict]:
    question_count = func.count(Question.id).label("question_count")
    result = await session.execute(
        select(User.id, User.name, question_count)
        .outerjoin(Question, Question.user_id == User.id)
        .where(User.company_id == company_id)
        .group_by(User.id, User.name)
        .order_by(desc("question_count"), User.name)
        .limit(limit)
    )
    return [{"user_id": row.id, "user_name": row.name, "question_count": row.question_count} for row in result]
