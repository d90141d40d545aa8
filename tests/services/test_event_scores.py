"""Tests for services/event_scores.py — the Event Score Writer."""

from __future__ import annotations

import pytest

from btcc_fantasy.exceptions import PartialCommitError, PreconditionError, PreconditionReason
from btcc_fantasy.services import EventScoreWriter
from btcc_fantasy.store import DeleteWrite, InMemoryDocumentStore, paths
from tests.conftest import FIXED_NOW, RESULTS_SAVED_AT, SEASON, FlakyStore, Seeder

QUALI = ["D2", "D1", "D9", "D4", "D5", "D6", "D3"]
RACE1 = ["D1", "D3", "D2", "D4", "D5", "D6"]


def _seed_event(seed: Seeder, locked: bool = True) -> None:
    seed.event("ev-1", 1, locked=locked)
    seed.results("ev-1", qualifying=QUALI, race1=RACE1)


def _score_doc(store, player_id: str, event_id: str = "ev-1") -> dict | None:
    return store.get(paths.scores(SEASON, event_id), player_id)


@pytest.fixture
def writer(store, settings, clock) -> EventScoreWriter:
    return EventScoreWriter(store, settings, clock=clock)


class TestScoreEvent:
    def test_scores_every_entry(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"], "Alex")
        seed.entry("ev-1", "p2", ["D4", "D5", "D6"], "Bea")

        report = writer.score_event(SEASON, "ev-1")

        assert report.entry_count == 2
        p1 = _score_doc(store, "p1")
        assert p1["qualifying"] == 11
        assert p1["race1"] == 75
        assert p1["total"] == 86
        assert p1["breakdown"]["qualifying"] == {"D1": 5, "D2": 6, "D3": 0}
        assert p1["displayName"] == "Alex"
        assert p1["rosterValid"] is True
        assert p1["resultsUpdatedAt"] == RESULTS_SAVED_AT
        assert p1["engineVersion"] == "test-1"
        assert p1["eventSequence"] == 1
        assert _score_doc(store, "p2")["total"] == (3 + 2 + 1) + (23 + 22 + 21)

    def test_writes_audit_record(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])

        report = writer.score_event(SEASON, "ev-1")

        run = store.get(paths.runs(SEASON), report.run_id)
        assert run["kind"] == "event_scores"
        assert run["entryCount"] == 1
        assert run["resultsUpdatedAt"] == RESULTS_SAVED_AT
        assert run["engineVersion"] == "test-1"
        assert run["failedChunks"] == []
        assert run["startedAt"] == FIXED_NOW

    def test_invalid_roster_scores_zero(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3", "D4", "D5", "D6", "D9"])

        writer.score_event(SEASON, "ev-1")

        doc = _score_doc(store, "p1")
        assert doc["rosterValid"] is False
        assert doc["total"] == 0
        assert [doc[s] for s in ("qualifying", "race1", "race2", "race3")] == [0, 0, 0, 0]
        assert doc["roster"] == ["D1", "D2", "D3", "D4", "D5", "D6", "D9"]

    def test_legacy_roster_field(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"], field="picks")

        writer.score_event(SEASON, "ev-1")

        assert _score_doc(store, "p1")["total"] == 86

    def test_repeated_driver_scored_once(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D1", "D2", "D3"])

        writer.score_event(SEASON, "ev-1")

        doc = _score_doc(store, "p1")
        assert doc["rosterValid"] is True
        assert doc["total"] == 86
        assert list(doc["breakdown"]["race1"]) == ["D1", "D2", "D3"]

    def test_malformed_entry_fields_do_not_block_event(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])
        store.put(paths.entries(SEASON, "ev-1"), "p2", {
            "driverIds": ["D4", "D5", "D6"],
            "displayName": 42,
            "submittedAt": "not a timestamp",
        })

        report = writer.score_event(SEASON, "ev-1")

        assert report.entry_count == 2
        assert _score_doc(store, "p2")["displayName"] == "42"
        assert _score_doc(store, "p1")["total"] == 86

    def test_event_ordered_by_event_no(self, store, seed, writer):
        store.put(paths.events(SEASON), "ev-1", {"eventNo": 3, "venue": "Donington", "resultsLocked": True})
        seed.results("ev-1", qualifying=QUALI, race1=RACE1)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])

        report = writer.score_event(SEASON, "ev-1")

        assert report.event_sequence == 3
        assert _score_doc(store, "p1")["eventSequence"] == 3

    def test_idempotent(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])
        seed.entry("ev-1", "p2", ["D4", "D5", "D6"])

        first = writer.score_event(SEASON, "ev-1")
        first_docs = store.list_documents(paths.scores(SEASON, "ev-1"))
        second = writer.score_event(SEASON, "ev-1")

        assert [s.total for s in first.scores] == [s.total for s in second.scores]
        assert store.list_documents(paths.scores(SEASON, "ev-1")) == first_docs

    def test_removed_driver_points_do_not_survive_rerun(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3", "D4"])
        writer.score_event(SEASON, "ev-1")
        assert "D4" in _score_doc(store, "p1")["breakdown"]["race1"]

        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])
        writer.score_event(SEASON, "ev-1")

        doc = _score_doc(store, "p1")
        assert all("D4" not in drivers for drivers in doc["breakdown"].values())
        assert doc["total"] == 86

    def test_deleted_entry_score_removed(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])
        seed.entry("ev-1", "p2", ["D4", "D5", "D6"])
        writer.score_event(SEASON, "ev-1")

        store.commit([DeleteWrite(paths.entries(SEASON, "ev-1"), "p2")])
        report = writer.score_event(SEASON, "ev-1")

        assert report.removed == ("p2",)
        assert _score_doc(store, "p2") is None

    def test_corrected_results_replace_scores(self, store, seed, writer):
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])
        writer.score_event(SEASON, "ev-1")

        seed.results("ev-1", qualifying=QUALI, race1=["D3", "D2", "D1"])
        writer.score_event(SEASON, "ev-1")

        assert _score_doc(store, "p1")["breakdown"]["race1"] == {"D1": 24, "D2": 25, "D3": 26}


class TestPreconditions:
    def test_not_locked_leaves_prior_scores(self, store, seed, writer):
        _seed_event(seed, locked=False)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])
        seed.score("ev-1", 1, "p1", 999)
        before = store.commit_count

        with pytest.raises(PreconditionError) as exc_info:
            writer.score_event(SEASON, "ev-1")

        assert exc_info.value.reason == PreconditionReason.EVENT_NOT_LOCKED
        assert _score_doc(store, "p1")["total"] == 999
        assert store.commit_count == before
        assert store.list_documents(paths.runs(SEASON)) == []

    def test_missing_event(self, writer):
        with pytest.raises(PreconditionError) as exc_info:
            writer.score_event(SEASON, "nope")
        assert exc_info.value.reason == PreconditionReason.EVENT_NOT_FOUND

    def test_missing_results(self, seed, writer):
        seed.event("ev-1", 1)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])
        with pytest.raises(PreconditionError) as exc_info:
            writer.score_event(SEASON, "ev-1")
        assert exc_info.value.reason == PreconditionReason.RESULTS_MISSING

    def test_no_entries(self, seed, writer):
        _seed_event(seed)
        with pytest.raises(PreconditionError) as exc_info:
            writer.score_event(SEASON, "ev-1")
        assert exc_info.value.reason == PreconditionReason.NO_ENTRIES

    def test_unlocked_while_scoring(self, settings, clock):
        class UnlockingStore(InMemoryDocumentStore):
            def list_documents(self, collection):
                docs = super().list_documents(collection)
                if collection.endswith("/entries"):
                    event = self.get(paths.events(SEASON), "ev-1")
                    self.put(paths.events(SEASON), "ev-1", {**event, "resultsLocked": False})
                return docs

        store = UnlockingStore()
        seed = Seeder(store)
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])

        with pytest.raises(PreconditionError) as exc_info:
            EventScoreWriter(store, settings, clock=clock).score_event(SEASON, "ev-1")

        assert exc_info.value.reason == PreconditionReason.RESULTS_CHANGED
        assert _score_doc(store, "p1") is None


class TestChunkedWrites:
    def test_respects_store_batch_bound(self, settings, clock):
        store = InMemoryDocumentStore(max_batch_size=2)
        seed = Seeder(store)
        _seed_event(seed)
        for i in range(5):
            seed.entry("ev-1", f"p{i}", ["D1", "D2", "D3"])

        report = EventScoreWriter(store, settings, clock=clock).score_event(SEASON, "ev-1")

        assert report.commit.write_count == 5
        assert report.commit.chunk_count == 3
        assert len(store.list_documents(paths.scores(SEASON, "ev-1"))) == 5

    def test_failed_chunk_reported_then_rerun_recovers(self, settings, clock):
        store = FlakyStore(fail_on={1}, max_batch_size=2)
        seed = Seeder(store)
        _seed_event(seed)
        for i in range(5):
            seed.entry("ev-1", f"p{i}", ["D1", "D2", "D3"])
        writer = EventScoreWriter(store, settings, clock=clock)

        with pytest.raises(PartialCommitError) as exc_info:
            writer.score_event(SEASON, "ev-1")

        report = exc_info.value.report
        assert report.failed_chunks == [1]
        assert report.failed_write_count == 2
        assert report.audit_written
        assert "1 of 3 chunks failed" in str(exc_info.value)
        runs = store.list_documents(paths.runs(SEASON))
        assert runs[0].data["failedChunks"] == [1]
        assert len(store.list_documents(paths.scores(SEASON, "ev-1"))) == 3

        writer.score_event(SEASON, "ev-1")
        assert len(store.list_documents(paths.scores(SEASON, "ev-1"))) == 5

    def test_audit_failure_is_reported(self, settings, clock):
        # Commit 0 scores the single chunk, commit 1 is the audit record
        store = FlakyStore(fail_on={1})
        seed = Seeder(store)
        _seed_event(seed)
        seed.entry("ev-1", "p1", ["D1", "D2", "D3"])

        with pytest.raises(PartialCommitError) as exc_info:
            EventScoreWriter(store, settings, clock=clock).score_event(SEASON, "ev-1")

        assert exc_info.value.report.failures == ()
        assert not exc_info.value.report.audit_written
        assert _score_doc(store, "p1")["total"] == 86
