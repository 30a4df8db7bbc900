"""Application exceptions, translated to the failure envelope by the error handlers."""


class AppError(Exception):
    """Base class for errors that carry their own HTTP status and error code."""

    code = "internal_error"
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class DuplicateEmail(AppError):
    code = "duplicate_email"
    status_code = 409
    default_message = "User already exists with this email"


class CompanyCreationConflict(AppError):
    code = "company_conflict"
    status_code = 409
    default_message = "Company was created concurrently, please retry"


class InvalidCredentials(AppError):
    code = "invalid_credentials"
    status_code = 401
    default_message = "Invalid credentials"


class InvalidToken(AppError):
    code = "invalid_token"
    status_code = 401
    default_message = "Invalid or expired token"


class InvalidRefreshToken(AppError):
    code = "invalid_refresh_token"
    status_code = 401
    default_message = "Invalid refresh token"


class Forbidden(AppError):
    code = "forbidden"
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(AppError):
    code = "not_found"
    status_code = 404
    default_message = "Resource not found"


class QuestionProcessingFailed(AppError):
    code = "question_processing_failed"
    status_code = 500
    default_message = "Failed to process question"
