"""Application-level exception types.

Services and the throttling/listing core raise these typed errors; the HTTP
layer maps each kind to a status code in ``exception_handlers``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    hint: str
    field: str
    value: str
    resource: str
    resource_id: str
    retry_after: int
    max_failures: int
    allowed: list[str]
    backend: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class InvalidQueryError(ValidationAppError):
    """Raised for malformed search/sort expressions or page parameters."""


class AuthenticationAppError(AppError):
    """Raised when authentication/authorization fails."""


class InvalidCredentialsError(AuthenticationAppError):
    """Raised when an email/password pair does not match.

    The message never says which of the two was wrong.
    """


@dataclass
class TooManyAttemptsError(AppError):
    """Raised while an identity is locked out after repeated failed logins."""

    retry_after_seconds: int = field(default=0)


class NotFoundError(AppError):
    """Raised when a requested document does not exist."""


class ConflictError(AppError):
    """Raised when a write would violate a uniqueness constraint."""


class StoreUnavailableError(AppError):
    """Raised when a document store call fails. Never retried locally."""
