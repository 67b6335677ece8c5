# backend/app/core/errors.py

from typing import Optional


class AppError(Exception):
    """Base error converted to an HTTP response at the API boundary."""

    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


class Unauthorized(AppError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class BadRequest(AppError):
    status_code = 400
    default_message = "Bad request"


class Conflict(AppError):
    status_code = 409
    default_message = "Conflict"


class UpstreamFailure(AppError):
    """Database, file storage or LLM provider failed or answered with an unexpected shape."""
    status_code = 502
    default_message = "Upstream service failure"


class AIResponseValidationError(UpstreamFailure):
    default_message = "Invalid response from AI provider"


class InternalError(AppError):
    status_code = 500


class InvalidTransition(AppError):
    """A job status change that would move backwards or out of a terminal state."""
    status_code = 409
    default_message = "Invalid job status transition"
