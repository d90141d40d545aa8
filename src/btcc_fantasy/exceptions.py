"""Custom exceptions for the fantasy scoring engine."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from btcc_fantasy.services.batching import CommitReport


class FantasyEngineError(Exception):
    """Base exception for all engine errors."""


# ── Store ────────────────────────────────────────────────────────────────────


class StoreError(FantasyEngineError):
    """Raised when the document store cannot complete a request."""


class StoreConnectionError(StoreError):
    """Raised when the store cannot be reached."""


class StoreTimeoutError(StoreError):
    """Raised when a store request times out."""


class StoreTransportError(StoreError):
    """Raised when a request fails in transit (connection reset, protocol error)."""


class StoreAPIError(StoreError):
    """Raised when the store returns an error response (4xx/5xx)."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class BatchTooLargeError(StoreError):
    """Raised when a commit carries more writes than the store accepts atomically."""

    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(f"Batch of {size} writes exceeds the store limit of {limit}")


class DocumentDecodeError(StoreError):
    """Raised when a stored document cannot be decoded into a record."""


# ── Engine ───────────────────────────────────────────────────────────────────


class PreconditionReason(str, Enum):
    """Why the engine refused to run. Callers can fix the cause and retry."""

    EVENT_NOT_FOUND = "event_not_found"
    EVENT_NOT_LOCKED = "event_not_locked"
    RESULTS_MISSING = "results_missing"
    NO_ENTRIES = "no_entries"
    RESULTS_CHANGED = "results_changed"
    NO_EVENTS = "no_events"


class PreconditionError(FantasyEngineError):
    """Raised before any write when an engine precondition does not hold."""

    def __init__(self, reason: PreconditionReason, message: str) -> None:
        self.reason = reason
        self.message = message
        super().__init__(f"{reason.value}: {message}")


class PartialCommitError(FantasyEngineError):
    """Raised after a run in which one or more write chunks failed to commit.

    A full re-run is always safe: every run replaces its whole output set.
    """

    def __init__(self, report: CommitReport) -> None:
        self.report = report
        failed = ", ".join(str(f.index) for f in report.failures) or "none"
        audit = "" if report.audit_written else "; audit record not written"
        super().__init__(
            f"{len(report.failures)} of {report.chunk_count} chunks failed "
            f"(chunks: {failed}; {report.failed_write_count} of "
            f"{report.write_count} writes not applied){audit}",
        )


class LockTransitionError(FantasyEngineError):
    """Raised for a lock/unlock request that is not a valid transition."""


class ResultsLockedError(FantasyEngineError):
    """Raised when results are edited on a locked event."""


class InvalidResultsError(FantasyEngineError):
    """Raised when a submitted finishing order is malformed."""
