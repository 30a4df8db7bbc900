"""Global exception handlers: map exceptions to the failure envelope."""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from question_api.errors import AppError
from question_api.utils.responses import error_response

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    400: "bad_request",
    401: "authentication_error",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    429: "rate_limit",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _json(status: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content=error_response(error, message))


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s on %s %s [%s]", exc.code, request.method, request.url.path, _request_id(request))
        return _json(exc.status_code, exc.code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        messages = ", ".join(
            f"{'.'.join(str(part) for part in e['loc'] if part != 'body')}: {e['msg']}" for e in exc.errors()
        )
        return _json(400, "validation_failed", messages)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: HTTPException):
        error = HTTP_ERROR_CODES.get(exc.status_code, "http_error")
        return _json(exc.status_code, error, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s [%s]", request.method, request.url.path, _request_id(request))
        return _json(500, "internal_error", "An unexpected error occurred")
