"""Builds season player standings up to a through-event."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from btcc_fantasy._logging import get_logger, log_engine_call
from btcc_fantasy.config import EngineSettings, get_settings
from btcc_fantasy.constants import RUN_PLAYER_STANDINGS
from btcc_fantasy.exceptions import PartialCommitError
from btcc_fantasy.models import Event, EventScore, PlayerStanding, RunRecord, StandingsMeta
from btcc_fantasy.services.batching import CommitReport, batch_limit, commit_in_chunks
from btcc_fantasy.services.common import (
    assign_positions,
    commit_audit,
    load_events_through,
    new_run_id,
    stale_deletes,
    utcnow,
)
from btcc_fantasy.store import DeleteWrite, DocumentStore, SetWrite, Write, paths

META_KIND = "playerStandings"


@dataclass
class _PlayerTotal:
    player_id: str
    total: int = 0
    event_ids: list[str] = field(default_factory=list)
    display_name: str = ""

    def add(self, score: EventScore) -> None:
        self.total += score.total
        if score.event_id not in self.event_ids:
            self.event_ids.append(score.event_id)
        # Later non-empty names win; older records may lack one
        if score.display_name.strip():
            self.display_name = score.display_name.strip()


@dataclass(frozen=True)
class StandingsRunReport:
    run_id: str
    season_id: str
    through_event_id: str
    through_sequence: int
    event_count: int
    standings: tuple[PlayerStanding, ...]
    removed: tuple[str, ...]
    commit: CommitReport


def accumulate_scores(events: list[Event], scores_by_event: dict[str, list[EventScore]]) -> list[_PlayerTotal]:
    """Fold per-event scores into one running total per player.

    Events are folded in the given order. A player only gains a term for
    the events they have a score in.
    """
    totals: dict[str, _PlayerTotal] = {}
    for event in events:
        for score in scores_by_event.get(event.event_id, []):
            totals.setdefault(score.player_id, _PlayerTotal(score.player_id)).add(score)
    return list(totals.values())


class PlayerStandingsBuilder:
    """Rebuilds every PlayerStanding of a season from EventScore records."""

    def __init__(
        self,
        store: DocumentStore,
        settings: EngineSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock

    def _load_scores(self, season_id: str, event: Event) -> list[EventScore]:
        docs = self._store.list_documents(paths.scores(season_id, event.event_id))
        return [EventScore.from_document(doc.id, doc.data) for doc in docs]

    @log_engine_call
    def rebuild(self, season_id: str, through_sequence: int) -> StandingsRunReport:
        """Replace the season's player standings with totals through *through_sequence*.

        Every event whose sequence number is <= *through_sequence* is
        included, whatever order its scores were saved in.
        """
        started_at = self._clock()
        events = load_events_through(self._store, season_id, through_sequence)
        through = events[-1]

        scores_by_event = {event.event_id: self._load_scores(season_id, event) for event in events}
        totals = accumulate_scores(events, scores_by_event)
        totals.sort(key=lambda t: (-t.total, t.display_name.casefold(), t.player_id))
        positions = assign_positions([t.total for t in totals])

        standings = [
            PlayerStanding(
                player_id=t.player_id,
                display_name=t.display_name,
                total=t.total,
                position=position,
                event_ids=t.event_ids,
                events_counted=len(t.event_ids),
                through_event_id=through.event_id,
                through_sequence=through.sequence_number,
                computed_at=started_at,
                engine_version=self._settings.engine_version,
            )
            for t, position in zip(totals, positions)
        ]

        collection = paths.player_standings(season_id)
        removed = stale_deletes(self._store, collection, {s.player_id for s in standings})
        writes: list[Write] = [SetWrite(collection, s.player_id, s.to_document()) for s in standings]
        writes += [DeleteWrite(collection, player_id) for player_id in removed]

        report = commit_in_chunks(
            self._store, writes, batch_limit(self._store, self._settings.max_batch_writes),
        )

        finished_at = self._clock()
        run_id = new_run_id(RUN_PLAYER_STANDINGS, started_at)
        run = RunRecord(
            run_id=run_id,
            kind=RUN_PLAYER_STANDINGS,
            season_id=season_id,
            through_event_id=through.event_id,
            through_sequence=through.sequence_number,
            event_count=len(events),
            write_count=report.write_count,
            chunk_count=report.chunk_count,
            failed_chunks=report.failed_chunks,
            engine_version=self._settings.engine_version,
            started_at=started_at,
            finished_at=finished_at,
        )
        meta = StandingsMeta(
            kind=META_KIND,
            last_rebuild_at=finished_at,
            through_event_id=through.event_id,
            through_sequence=through.sequence_number,
            event_count=len(events),
            record_count=len(standings),
            engine_version=self._settings.engine_version,
        )
        audit: list[Write] = [SetWrite(paths.runs(season_id), run_id, run.to_document())]
        if report.ok:
            # The season marker only advances when every standing landed
            audit.append(SetWrite(paths.meta(season_id), META_KIND, meta.to_document()))
        report = commit_audit(self._store, audit, report)

        if not report.ok:
            raise PartialCommitError(report)

        get_logger().info(
            "Rebuilt %d player standings for %s through %s (#%d, %d events)",
            len(standings), season_id, through.event_id, through.sequence_number, len(events),
        )
        return StandingsRunReport(
            run_id=run_id,
            season_id=season_id,
            through_event_id=through.event_id,
            through_sequence=through.sequence_number,
            event_count=len(events),
            standings=tuple(standings),
            removed=tuple(removed),
            commit=report,
        )
