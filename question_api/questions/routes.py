"""Question endpoints: ask, my questions, company questions, by id."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from question_api.auth.dependencies import CurrentUser, get_current_user, require_admin
from question_api.db.client import get_session
from question_api.errors import NotFound
from question_api.questions import service
from question_api.questions.repository import Page
from question_api.questions.schemas import AskQuestionRequest, Pagination, QuestionPageResponse, QuestionResponse
from question_api.utils.responses import success_response

router = APIRouter(prefix="/api/questions", tags=["Questions"])


def _page_response(page: Page) -> QuestionPageResponse:
    return QuestionPageResponse(
        data=[QuestionResponse.model_validate(q) for q in page.items],
        pagination=Pagination(page=page.page, limit=page.limit, total=page.total, pages=page.pages),
    )


@router.post("", status_code=201, summary="Ask a question", description="Send a question to the AI provider and store the answer.")
async def ask(
    body: AskQuestionRequest,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    question = await service.ask_question(session, body.question, user.id, user.company_id)
    return success_response(QuestionResponse.model_validate(question), "Question processed successfully")


@router.get("/my-questions", summary="List my questions", description="The authenticated user's questions, newest first.")
async def my_questions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    result = await service.get_user_questions(session, user.id, user.company_id, page, limit)
    return success_response(_page_response(result), "Questions retrieved successfully")


@router.get("/company", summary="List company questions", description="All questions asked within the admin's company, newest first.")
async def company_questions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: CurrentUser = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    result = await service.get_company_questions(session, user.company_id, page, limit)
    return success_response(_page_response(result), "Company questions retrieved successfully")


@router.get("/{question_id}", summary="Get a question", description="A single question of the caller's company.")
async def get(
    question_id: str,
    user: CurrentUser = Depends(get_current_user),
    session: AsyncSession = Depends(get_session),
):
    question = await service.get_question_by_id(session, question_id, user.company_id)
    if question is None:
        raise NotFound("Question not found")
    return success_response(QuestionResponse.model_validate(question), "Question retrieved successfully")
