"""Chunked atomic commits with per-chunk failure reporting."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import TypeVar

from btcc_fantasy._logging import get_logger
from btcc_fantasy.exceptions import StoreError
from btcc_fantasy.store.base import DocumentStore, Write

T = TypeVar("T")


@dataclass(frozen=True)
class ChunkFailure:
    index: int
    size: int
    error: str


@dataclass(frozen=True)
class CommitReport:
    write_count: int
    chunk_count: int
    failures: tuple[ChunkFailure, ...] = ()
    audit_written: bool = True

    @property
    def ok(self) -> bool:
        return not self.failures and self.audit_written

    @property
    def failed_chunks(self) -> list[int]:
        return [f.index for f in self.failures]

    @property
    def failed_write_count(self) -> int:
        return sum(f.size for f in self.failures)

    def without_audit(self) -> CommitReport:
        return replace(self, audit_written=False)


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """Split *items* into consecutive lists of at most *size* elements."""
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def batch_limit(store: DocumentStore, configured: int) -> int:
    """Return the largest chunk both the store and the settings allow."""
    return max(1, min(configured, store.max_batch_size))


def commit_in_chunks(
    store: DocumentStore,
    writes: Sequence[Write],
    limit: int,
) -> CommitReport:
    """Commit *writes* in chunks of at most *limit*, each chunk atomically.

    A failed chunk does not stop the remaining chunks; every failure is
    recorded in the returned report.
    """
    chunks = chunked(writes, limit)
    failures: list[ChunkFailure] = []

    for index, chunk in enumerate(chunks):
        try:
            store.commit(chunk)
        except StoreError as exc:
            get_logger().error(
                "Chunk %d/%d (%d writes) failed: %s: %s",
                index + 1, len(chunks), len(chunk), type(exc).__name__, exc,
            )
            failures.append(ChunkFailure(index=index, size=len(chunk), error=str(exc)))

    return CommitReport(
        write_count=len(writes),
        chunk_count=len(chunks),
        failures=tuple(failures),
    )
