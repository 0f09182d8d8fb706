"""
core/errors.py -- Domain error taxonomy shared by the auth and items layers.

Services raise these; api/main.py owns the single exception handler that
turns them into the {"error": {...}} envelope. Each class fixes the HTTP
status and the machine-readable code so call sites only supply a message.

Infrastructure failures (database down, driver errors) are deliberately not
represented here. They propagate as their own exception types and become a
generic 500 in the API layer, with the detail logged but never returned.

Layer rule: core/ is the kernel -- no imports from api/, auth/, or items/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for client-correctable failures."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = 400
    code = "bad_request"
    default_message = "Bad request."


class UnauthorizedError(AppError):
    status_code = 401
    code = "unauthorized"
    default_message = "Authentication required."


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Not found."


class ConflictError(AppError):
    status_code = 409
    code = "conflict"
    default_message = "Conflict."
