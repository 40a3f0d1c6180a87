from __future__ import annotations

from typing import Any, List, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400

    def __init__(self, message: str, *, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidIdentifierError(ValidationError):
    """Raised when an identifier is not a 24 hex character object id."""


class InvalidEnumError(ValidationError):
    """Raised when a value is outside its allowed set."""


class InvalidDateError(ValidationError):
    """Raised when a date string cannot be parsed."""


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are missing or invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403


class NotFoundError(DomainError):
    status_code = 404


class ConflictError(DomainError):
    """Raised on uniqueness violations and illegal state transitions."""

    status_code = 409
