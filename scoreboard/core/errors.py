"""Application error taxonomy.

Every error carries the HTTP status it maps to and a stable machine-readable
code. The exception handlers installed by the app factory turn them into the
``{success: false, message, code}`` envelope.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base class for errors that are safe to report to API callers."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code


class ValidationError(AppError):
    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(f"{field}: {message}" if field else message)


class UnauthorizedError(AppError):
    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "Access forbidden") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppError):
    status_code = 409
    code = "CONFLICT"


class TrackNotFoundError(NotFoundError):
    def __init__(self, track_id: str) -> None:
        super().__init__("Track not found")
        self.track_id = track_id


class ScoreNotFoundError(NotFoundError):
    def __init__(self, track_id: str) -> None:
        super().__init__("Score not found")
        self.track_id = track_id


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: object) -> None:
        super().__init__("User not found")
        self.user_id = user_id


__all__ = [
    "AppError",
    "ConflictError",
    "ForbiddenError",
    "NotFoundError",
    "ScoreNotFoundError",
    "TrackNotFoundError",
    "UnauthorizedError",
    "UserNotFoundError",
    "ValidationError",
]
