"""Error taxonomy shared by the engine, the generators and the API layer.

Each class carries the HTTP status and error code the API reports for it.
``UpstreamGenerationError`` and ``RepositoryUnavailable`` are normally
absorbed before reaching a client (placeholder content and in-memory
fallback respectively); the codes exist for the cases where they escape.
"""

from __future__ import annotations

from typing import Optional


class LearnfeedError(Exception):
    status_code: int = 500
    error_code: str = "learnfeed_error"

    def __init__(self, message: str, *, details: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(LearnfeedError):
    """Missing or malformed input. Reported immediately, never retried."""

    status_code = 400
    error_code = "validation_error"


class UpstreamGenerationError(LearnfeedError):
    """The content generator failed or returned unusable content."""

    status_code = 502
    error_code = "upstream_generation_error"


class RepositoryUnavailable(LearnfeedError):
    """The persistent store could not be reached."""

    status_code = 503
    error_code = "repository_unavailable"


class EmptyFeed(LearnfeedError):
    """The user owns no learning items. A legitimate state, not a failure."""

    status_code = 404
    error_code = "empty_feed"


class OutOfRange(LearnfeedError):
    """Session position outside the queue. Indicates a programming error."""

    status_code = 500
    error_code = "out_of_range"


__all__ = [
    "LearnfeedError",
    "ValidationError",
    "UpstreamGenerationError",
    "RepositoryUnavailable",
    "EmptyFeed",
    "OutOfRange",
]
