"""Map session-layer errors onto HTTP responses."""
from __future__ import annotations

import logging

from fastapi import HTTPException

from services.errors import (
    AuthorizationError,
    InterviewError,
    NotFoundError,
    PersistenceError,
    UpstreamError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def http_error(exc: InterviewError) -> HTTPException:
    """Return the HTTPException matching ``exc``."""

    if isinstance(exc, ValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=f"{exc.kind.capitalize()} not found")
    if isinstance(exc, AuthorizationError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, UpstreamError):
        logger.error("LLM request failed: %s", exc)
        return HTTPException(status_code=502, detail=f"LLM request failed: {exc}")
    if isinstance(exc, PersistenceError):
        logger.error("Storage failure: %s", exc)
        return HTTPException(status_code=500, detail="Storage failure")
    logger.error("Unhandled interview error: %s", exc)
    return HTTPException(status_code=500, detail="Internal server error")
