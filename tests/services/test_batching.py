"""Tests for services/batching.py — chunked commits."""

from __future__ import annotations

import pytest

from btcc_fantasy.services.batching import CommitReport, batch_limit, chunked, commit_in_chunks
from btcc_fantasy.store import InMemoryDocumentStore, SetWrite
from tests.conftest import FlakyStore


def _writes(n: int) -> list[SetWrite]:
    return [SetWrite("docs", f"d{i:03d}", {"n": i}) for i in range(n)]


class TestChunked:
    def test_splits_evenly_and_remainder(self):
        assert [len(c) for c in chunked(list(range(7)), 3)] == [3, 3, 1]

    def test_empty(self):
        assert chunked([], 5) == []

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            chunked([1], 0)


class TestBatchLimit:
    def test_store_bound_wins(self):
        assert batch_limit(InMemoryDocumentStore(max_batch_size=10), 500) == 10

    def test_configured_bound_wins(self):
        assert batch_limit(InMemoryDocumentStore(max_batch_size=500), 50) == 50


class TestCommitInChunks:
    def test_all_chunks_committed(self):
        store = InMemoryDocumentStore(max_batch_size=4)
        report = commit_in_chunks(store, _writes(10), 4)
        assert report == CommitReport(write_count=10, chunk_count=3)
        assert report.ok
        assert len(store.list_documents("docs")) == 10
        assert store.commit_count == 3

    def test_failed_chunk_reported_and_others_applied(self):
        store = FlakyStore(fail_on={1}, max_batch_size=4)
        report = commit_in_chunks(store, _writes(10), 4)
        assert not report.ok
        assert report.failed_chunks == [1]
        assert report.failed_write_count == 4
        assert "503" in report.failures[0].error
        ids = {d.id for d in store.list_documents("docs")}
        assert ids == {f"d{i:03d}" for i in (0, 1, 2, 3, 8, 9)}

    def test_no_writes(self):
        report = commit_in_chunks(InMemoryDocumentStore(), [], 10)
        assert report.chunk_count == 0
        assert report.ok

    def test_without_audit_marks_not_ok(self):
        report = CommitReport(write_count=1, chunk_count=1).without_audit()
        assert not report.ok
        assert report.failed_chunks == []
