"""Question API: FastAPI application entry point."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI

from question_api.admin.routes import router as admin_router
from question_api.auth.routes import router as auth_router
from question_api.config.cors import SecurityHeadersMiddleware, configure_cors
from question_api.config.logging import configure_logging
from question_api.config.settings import get_settings
from question_api.db.client import close_database, init_database
from question_api.middleware.error_handler import register_error_handlers
from question_api.middleware.rate_limiter import RateLimiterMiddleware
from question_api.middleware.request_id import RequestIDMiddleware
from question_api.questions.routes import router as questions_router
from question_api.utils.responses import success_response


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_database(app)
    yield
    await close_database(app)


def create_app() -> FastAPI:
    # Fails fast when required settings (JWT secrets) are missing
    get_settings()
    configure_logging()

    app = FastAPI(
        title="Question API",
        description=(
            "Multi-tenant question answering backend.\n\n"
            "## Features\n"
            "- Company (tenant) creation on first registration; the first user is the admin\n"
            "- JWT access tokens with single-use refresh token rotation\n"
            "- AI answers via Groq or Google AI, with a mock provider for development\n"
            "- Paginated question history per user and per company\n"
            "- Admin statistics: questions per day, top users, dashboard\n\n"
            "## Authentication\n"
            "All endpoints except `/health` and `/api/auth/*` require "
            "`Authorization: Bearer <access token>`."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Health", "description": "Health check endpoints"},
            {"name": "Auth", "description": "Authentication: register, login, token refresh, logout"},
            {"name": "Questions", "description": "Ask questions and browse answers"},
            {"name": "Admin", "description": "Company statistics (admin only)"},
        ],
    )

    # --- Middleware (last added is outermost) ---
    app.add_middleware(RateLimiterMiddleware)
    configure_cors(app)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # --- Error handlers ---
    register_error_handlers(app)

    # --- Routes ---
    app.include_router(auth_router)
    app.include_router(questions_router)
    app.include_router(admin_router)

    @app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
    @app.get("/api/health", tags=["Health"], include_in_schema=False)
    async def health_check():
        return success_response(
            {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()},
            "API is healthy",
        )

    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on HOST:PORT."""
    settings = get_settings()
    uvicorn.run("question_api.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
