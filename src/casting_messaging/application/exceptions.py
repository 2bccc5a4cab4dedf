from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "", **extra: Any) -> None:
        self.detail = detail
        self.extra = extra
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ForbiddenError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class AuthenticationError(AppError):
    pass
