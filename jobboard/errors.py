"""
Error taxonomy shared by the managers.

Each error carries the HTTP status it is reported with; the handlers in
``main.py`` turn them into ``{"success": false, "error": ...}`` bodies.
"""
from __future__ import annotations


class AppError(Exception):
    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppError):
    """A required field is missing or empty."""
    status_code = 400


class ConflictError(AppError):
    """The request clashes with existing state (e.g. email already registered)."""
    status_code = 409


class AlreadySavedError(ConflictError):
    # saved-jobs conflicts are reported as 400 on the relation endpoints
    status_code = 400


class NotSavedError(ConflictError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    status_code = 500

    def __init__(self, message: str = "Erro interno do servidor"):
        super().__init__(message)
