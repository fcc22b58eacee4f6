from __future__ import annotations

from typing import Sequence


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced slot, session or student does not exist."""


class ConflictError(DomainError):
    """Raised when a timetable slot overlaps existing slots."""

    def __init__(self, message: str, conflicts: Sequence = ()):
        super().__init__(message)
        self.conflicts = list(conflicts)


class AlreadyLockedError(DomainError):
    """Raised when locking a session that is already locked."""


class SessionLockedError(DomainError):
    """Raised when a mark write or deletion targets a locked session."""


class NotEnrolledError(DomainError):
    """Raised when a student is outside the session's scoped population."""


class InvalidCriteriaError(DomainError):
    """Raised by strict criteria parsing for an unrecognized rule payload."""
