"""Error taxonomy for reviewroster.

Every failure the core reports is a ``ReviewRosterError`` subclass carrying a
stable machine-readable ``code``. Mapping codes to protocol status codes is
the transport layer's job (see ``reviewroster.api.errors``).
"""
from enum import Enum
from typing import Optional


class ConflictKind(str, Enum):
    """Business-rule conflicts a request can run into."""
    ALREADY_EXISTS = "already_exists"
    ALREADY_MERGED = "already_merged"
    NOT_ASSIGNED = "not_assigned"
    NO_CANDIDATE = "no_candidate"


class ReviewRosterError(Exception):
    """Base class for all reviewroster errors."""

    code: str = "INTERNAL_ERROR"
    default_message: str = "internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(code='{self.code}', message='{self.message}')>"


class InvalidInputError(ReviewRosterError):
    """Malformed or missing required fields."""

    code = "INVALID_INPUT"
    default_message = "input data is invalid"


class NotFoundError(ReviewRosterError):
    """A referenced entity does not exist."""

    code = "NOT_FOUND"
    default_message = "resource not found"


class ConflictError(ReviewRosterError):
    """The request violates a business rule; retrying it unchanged won't help."""

    code = "CONFLICT"
    default_message = "request conflicts with current state"
    kind: ConflictKind


class AlreadyExistsError(ConflictError):
    kind = ConflictKind.ALREADY_EXISTS


class TeamExistsError(AlreadyExistsError):
    code = "TEAM_EXISTS"
    default_message = "team_name already exists"


class PullRequestExistsError(AlreadyExistsError):
    code = "PR_EXISTS"
    default_message = "PR id already exists"


class AlreadyMergedError(ConflictError):
    kind = ConflictKind.ALREADY_MERGED
    code = "PR_MERGED"
    default_message = "cannot reassign on merged PR"


class NotAssignedError(ConflictError):
    kind = ConflictKind.NOT_ASSIGNED
    code = "NOT_ASSIGNED"
    default_message = "reviewer not assigned"


class NoCandidateError(ConflictError):
    kind = ConflictKind.NO_CANDIDATE
    code = "NO_CANDIDATE"
    default_message = "no suitable candidate found"


class InternalError(ReviewRosterError):
    """Storage or transaction failure. Safe to retry."""


__all__ = [
    "ConflictKind",
    "ReviewRosterError",
    "InvalidInputError",
    "NotFoundError",
    "ConflictError",
    "AlreadyExistsError",
    "TeamExistsError",
    "PullRequestExistsError",
    "AlreadyMergedError",
    "NotAssignedError",
    "NoCandidateError",
    "InternalError",
]
