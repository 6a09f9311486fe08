"""Error taxonomy for interview session operations."""
from __future__ import annotations


class InterviewError(Exception):
    """Base class for errors surfaced by the session layer."""


class ValidationError(InterviewError):
    """Required input is missing or malformed."""


class NotFoundError(InterviewError):
    """A referenced user or conversation does not exist."""

    def __init__(self, kind: str, identifier: str | None = None) -> None:
        self.kind = kind
        self.identifier = identifier
        detail = f"{kind} not found"
        if identifier:
            detail = f"{detail}: {identifier}"
        super().__init__(detail)


class AuthorizationError(InterviewError):
    """The conversation does not belong to the requesting user."""


class UpstreamError(InterviewError):
    """The completion service failed to produce a response."""


class PersistenceError(InterviewError):
    """A store read or write failed."""


__all__ = [
    "InterviewError",
    "ValidationError",
    "NotFoundError",
    "AuthorizationError",
    "UpstreamError",
    "PersistenceError",
]
