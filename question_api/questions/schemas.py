"""Pydantic schemas for question requests and responses."""

from pydantic import Field

from question_api.utils.responses import CamelModel, UTCDateTime


# --- Requests ---

class AskQuestionRequest(CamelModel):
    question: str = Field(min_length=5, max_length=1000)


# --- Responses ---

class QuestionAuthor(CamelModel):
    id: str
    name: str
    email: str


class QuestionResponse(CamelModel):
    id: str
    question: str
    answer: str
    user_id: str
    company_id: str
    created_at: UTCDateTime
    user: QuestionAuthor | None = None


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class QuestionPageResponse(CamelModel):
    data: list[QuestionResponse]
    pagination: Pagination


class DailyCount(CamelModel):
    date: str
    count: int


class UserQuestionCount(CamelModel):
    user_id: str
    user_name: str
    question_count: int


class DashboardSummary(CamelModel):
    total_questions_this_week: int
    question_stats: list[DailyCount]
    top_users: list[UserQuestionCount]
    generated_at: UTCDateTime
