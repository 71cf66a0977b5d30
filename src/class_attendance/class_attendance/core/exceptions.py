from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is a stable machine-readable kind; ``details`` carries the
    offending identifiers so callers can act on the error.
    """

    code = "domain_error"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = {k: v for k, v in details.items() if v is not None}

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": dict(self.details)}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "authentication_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "authorization_error"

    def __init__(self, message: str, *, student_id: Optional[int] = None, **details: Any):
        super().__init__(message, student_id=student_id, **details)
        self.student_id = student_id


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = "not_found"

    def __init__(self, entity: str, identifier: Any):
        super().__init__(f"{entity} {identifier} not found", entity=entity, id=identifier)
        self.entity = entity
        self.identifier = identifier


class ConflictError(DomainError):
    """Raised when a student already has a record in the day's session."""

    code = "conflict"

    def __init__(self, message: str, *, student_id: Optional[int] = None, **details: Any):
        super().__init__(message, student_id=student_id, **details)
        self.student_id = student_id


class ConcurrencyError(DomainError):
    """Raised when a concurrent writer won the race; the caller may retry."""

    code = "concurrency_error"


class DuplicateSessionError(ConcurrencyError):
    """Raised by storage when (subject, day) already has a session."""
