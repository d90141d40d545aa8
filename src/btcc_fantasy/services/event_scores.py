"""Scores every entry of a locked event."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from btcc_fantasy._logging import get_logger, log_engine_call
from btcc_fantasy.config import EngineSettings, get_settings
from btcc_fantasy.constants import QUALIFYING, RACE_1, RACE_2, RACE_3, RUN_EVENT_SCORES
from btcc_fantasy.exceptions import PartialCommitError, PreconditionError, PreconditionReason
from btcc_fantasy.models import Entry, Event, EventScore, RaceResult, RunRecord
from btcc_fantasy.scoring import score_roster, validate_roster
from btcc_fantasy.services.batching import CommitReport, batch_limit, commit_in_chunks
from btcc_fantasy.services.common import (
    commit_audit,
    load_event,
    new_run_id,
    stale_deletes,
    utcnow,
)
from btcc_fantasy.store import DeleteWrite, DocumentStore, SetWrite, Write, paths


@dataclass(frozen=True)
class ScoreRunReport:
    run_id: str
    season_id: str
    event_id: str
    event_sequence: int
    entry_count: int
    scores: tuple[EventScore, ...]
    removed: tuple[str, ...]
    commit: CommitReport


class EventScoreWriter:
    """Scores all entries of one event and replaces the event's score set."""

    def __init__(
        self,
        store: DocumentStore,
        settings: EngineSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock

    # ── Reads ──────────────────────────────────────────────────

    def _load_results(self, season_id: str, event_id: str) -> RaceResult | None:
        data = self._store.get(paths.results(season_id), event_id)
        if data is None:
            return None
        return RaceResult.from_document(event_id, data)

    def _load_entries(self, season_id: str, event_id: str) -> list[Entry]:
        docs = self._store.list_documents(paths.entries(season_id, event_id))
        return [Entry.from_document(doc.id, doc.data, event_id=event_id) for doc in docs]

    def _check_preconditions(
        self, season_id: str, event_id: str,
    ) -> tuple[Event, RaceResult]:
        event = load_event(self._store, season_id, event_id)
        if not event.results_locked:
            raise PreconditionError(
                PreconditionReason.EVENT_NOT_LOCKED,
                f"Results for event {event_id!r} are not locked",
            )
        results = self._load_results(season_id, event_id)
        if results is None:
            raise PreconditionError(
                PreconditionReason.RESULTS_MISSING,
                f"No results recorded for event {event_id!r}",
            )
        return event, results

    def _confirm_unchanged(self, season_id: str, event_id: str, results: RaceResult) -> None:
        """Re-read lock state and results just before writing."""
        event = load_event(self._store, season_id, event_id)
        current = self._load_results(season_id, event_id)
        if not event.results_locked or current != results:
            raise PreconditionError(
                PreconditionReason.RESULTS_CHANGED,
                f"Event {event_id!r} was unlocked or its results changed while scoring",
            )

    # ── Scoring ────────────────────────────────────────────────

    def score_entry(
        self, event: Event, results: RaceResult, entry: Entry, scored_at: datetime,
    ) -> EventScore:
        """Build the EventScore for one entry (no store access)."""
        roster = validate_roster(
            entry.driver_ids,
            min_size=self._settings.roster_min,
            max_size=self._settings.roster_max,
        )
        breakdown = score_roster(roster, results.orders())
        return EventScore(
            player_id=entry.player_id,
            event_id=event.event_id,
            event_sequence=event.sequence_number,
            display_name=entry.display_name,
            roster=list(entry.driver_ids),
            roster_valid=bool(roster),
            qualifying=breakdown.subtotal(QUALIFYING),
            race1=breakdown.subtotal(RACE_1),
            race2=breakdown.subtotal(RACE_2),
            race3=breakdown.subtotal(RACE_3),
            total=breakdown.total,
            breakdown=breakdown.per_driver,
            results_updated_at=results.updated_at,
            engine_version=self._settings.engine_version,
            ruleset=self._settings.ruleset,
            scored_at=scored_at,
        )

    @log_engine_call
    def score_event(self, season_id: str, event_id: str) -> ScoreRunReport:
        """Score every entry of a locked event and replace its EventScore set.

        Raises PreconditionError (nothing written) when the event is not
        locked, has no results or has no entries, and PartialCommitError
        when some write chunks failed. Re-running is always safe.
        """
        started_at = self._clock()
        logger = get_logger()

        try:
            event, results = self._check_preconditions(season_id, event_id)
            entries = self._load_entries(season_id, event_id)
            if not entries:
                raise PreconditionError(
                    PreconditionReason.NO_ENTRIES,
                    f"Event {event_id!r} has no entries",
                )
        except PreconditionError as exc:
            logger.warning("Scoring refused for %s/%s: %s", season_id, event_id, exc)
            raise

        scores = [self.score_entry(event, results, entry, started_at) for entry in entries]
        invalid = sum(1 for s in scores if not s.roster_valid)
        if invalid:
            logger.info("%d of %d entries for %s have invalid rosters", invalid, len(scores), event_id)

        collection = paths.scores(season_id, event_id)
        keep = {s.player_id for s in scores}
        removed = stale_deletes(self._store, collection, keep)
        writes: list[Write] = [SetWrite(collection, s.player_id, s.to_document()) for s in scores]
        writes += [DeleteWrite(collection, player_id) for player_id in removed]

        self._confirm_unchanged(season_id, event_id, results)

        report = commit_in_chunks(
            self._store, writes, batch_limit(self._store, self._settings.max_batch_writes),
        )

        run_id = new_run_id(RUN_EVENT_SCORES, started_at)
        run = RunRecord(
            run_id=run_id,
            kind=RUN_EVENT_SCORES,
            season_id=season_id,
            event_id=event_id,
            entry_count=len(entries),
            results_updated_at=results.updated_at,
            write_count=report.write_count,
            chunk_count=report.chunk_count,
            failed_chunks=report.failed_chunks,
            engine_version=self._settings.engine_version,
            ruleset=self._settings.ruleset,
            started_at=started_at,
            finished_at=self._clock(),
        )
        report = commit_audit(
            self._store, [SetWrite(paths.runs(season_id), run_id, run.to_document())], report,
        )

        if not report.ok:
            raise PartialCommitError(report)

        logger.info(
            "Scored %d entries for %s/%s (%d writes, %d chunks, %d stale removed)",
            len(scores), season_id, event_id, report.write_count, report.chunk_count, len(removed),
        )
        return ScoreRunReport(
            run_id=run_id,
            season_id=season_id,
            event_id=event_id,
            event_sequence=event.sequence_number,
            entry_count=len(entries),
            scores=tuple(scores),
            removed=tuple(removed),
            commit=report,
        )
