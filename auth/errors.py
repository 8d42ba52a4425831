"""
Error taxonomy for the authentication core.

Every operation failure is an ``AuthError`` subclass tagged with an
``ErrorKind``.  The service boundary turns these into failed
``AuthResult`` values; nothing is raised past it.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    NO_ACTIVE_SESSION = "no_active_session"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class AuthError(Exception):
    kind: ErrorKind = ErrorKind.INTERNAL
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InputValidationError(AuthError):
    kind = ErrorKind.VALIDATION
    default_message = "Email and password required"


class AlreadyExistsError(AuthError):
    kind = ErrorKind.ALREADY_EXISTS
    default_message = "User already exists"


class InvalidCredentialsError(AuthError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid credentials"


class UnauthorizedError(AuthError):
    kind = ErrorKind.UNAUTHORIZED
    default_message = "Authentication required"


class NotFoundError(AuthError):
    kind = ErrorKind.NOT_FOUND
    default_message = "User not found"


class NoActiveSessionError(AuthError):
    kind = ErrorKind.NO_ACTIVE_SESSION
    default_message = "No active session found"


class ConflictError(AuthError):
    """Raised by the user store when ``identifier_hash`` is already taken."""

    kind = ErrorKind.CONFLICT
    default_message = "User already exists"


class InternalError(AuthError):
    kind = ErrorKind.INTERNAL
