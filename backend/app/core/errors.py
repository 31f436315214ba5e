"""
Application exceptions.

Every error carries an ErrorCode that maps to exactly one HTTP status and one
user-facing message. The internal message is for logs only; responses use
``user_message`` for infrastructure failures so engine details never leak.

Usage:
    from app.core.errors import NotFoundError

    raise NotFoundError("Trip AB12CD not found")
"""
from enum import Enum


class ErrorCode(str, Enum):
    """Stable error categories exposed to API clients."""

    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


USER_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_INPUT: "The request contains invalid data.",
    ErrorCode.UNAUTHORIZED: "Authentication required.",
    ErrorCode.NOT_FOUND: "The requested resource was not found.",
    ErrorCode.CONFLICT: "The request conflicts with existing data.",
    ErrorCode.INTERNAL_ERROR: "An unexpected error occurred. Please try again.",
}

STATUS_CODES: dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.UNAUTHORIZED: 401,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INTERNAL_ERROR: 500,
}


class AppError(Exception):
    """Base exception for all domain errors."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.code]

    @property
    def user_message(self) -> str:
        return USER_MESSAGES[self.code]

    @property
    def public_message(self) -> str:
        """Message safe to send to the client."""
        return self.message


class InvalidInputError(AppError):
    """Bad request shape or out-of-range value, rejected before any engine call."""

    code = ErrorCode.INVALID_INPUT


class UnauthorizedError(AppError):
    code = ErrorCode.UNAUTHORIZED


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND


class ConflictError(AppError):
    """A state precondition was violated, e.g. a duplicate row."""

    code = ErrorCode.CONFLICT


class InfrastructureError(AppError):
    """Engine unreachable, malformed response or aborted transaction."""

    code = ErrorCode.INTERNAL_ERROR

    @property
    def public_message(self) -> str:
        return self.user_message
