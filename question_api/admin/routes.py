"""Admin-only statistics endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from question_api.auth.dependencies import CurrentUser, require_admin
from question_api.db.client import get_session
from question_api.questions import service
from question_api.questions.schemas import DailyCount, DashboardSummary, UserQuestionCount
from question_api.utils.responses import success_response

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/stats/questions", summary="Questions per day for the admin's company")
async def question_stats(
    days: int = Query(30, ge=1, le=365),
    user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    stats = await service.get_question_stats(session, user.company_id, days)
    return success_response([DailyCount(**s) for s in stats], "Question statistics retrieved successfully")


@router.get("/stats/users", summary="Users ranked by number of questions")
async def top_users(
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    stats = await service.get_top_users(session, user.company_id, limit)
    return success_response([UserQuestionCount(**s) for s in stats], "Top users retrieved successfully")


@router.get("/dashboard", summary="Last 7 days of activity and the top 5 users")
async def dashboard(
    user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    question_stats = await service.get_question_stats(session, user.company_id, 7)
    top = await service.get_top_users(session, user.company_id, 5)

    summary = DashboardSummary(
        total_questions_this_week=sum(s["count"] for s in question_stats),
        question_stats=[DailyCount(**s) for s in question_stats],
        top_users=[UserQuestionCount(**s) for s in top],
        generated_at=datetime.now(timezone.utc),
    )
    return success_response(summary, "Dashboard summary retrieved successfully")
