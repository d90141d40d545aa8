"""Builds team standings by grouping player standings by fantasy team."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from btcc_fantasy._logging import get_logger, log_engine_call
from btcc_fantasy.config import EngineSettings, get_settings
from btcc_fantasy.constants import RUN_TEAM_STANDINGS
from btcc_fantasy.exceptions import PartialCommitError
from btcc_fantasy.models import (
    PlayerProfile,
    PlayerStanding,
    RunRecord,
    StandingsMeta,
    TeamMember,
    TeamStanding,
)
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

META_KIND = "teamStandings"


@dataclass
class _TeamGroup:
    team_id: str
    team_name: str
    members: list[TeamMember] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(m.total for m in self.members)


@dataclass(frozen=True)
class TeamStandingsRunReport:
    run_id: str
    season_id: str
    through_event_id: str
    through_sequence: int
    # Threshold recorded on the player standings that were read
    source_through_sequence: int | None
    standings: tuple[TeamStanding, ...]
    removed: tuple[str, ...]
    commit: CommitReport


class TeamStandingsBuilder:
    """Rebuilds every TeamStanding of a season from its PlayerStandings.

    Run it after PlayerStandingsBuilder for the same threshold. Against an
    older player rebuild it yields an older, self-consistent result; the
    recorded ``source_through_sequence`` shows which.
    """

    def __init__(
        self,
        store: DocumentStore,
        settings: EngineSettings | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._settings = settings or get_settings()
        self._clock = clock

    def _load_profiles(self) -> dict[str, PlayerProfile]:
        docs = self._store.list_documents(paths.players())
        return {doc.id: PlayerProfile.from_document(doc.id, doc.data) for doc in docs}

    def _load_player_standings(self, season_id: str) -> list[PlayerStanding]:
        docs = self._store.list_documents(paths.player_standings(season_id))
        return [PlayerStanding.from_document(doc.id, doc.data) for doc in docs]

    def resolve_team(self, profile: PlayerProfile | None) -> tuple[str, str]:
        """Return (team id, team name) for a player, or the unassigned bucket."""
        team_id = (profile.team_id or "").strip() if profile else ""
        if not team_id:
            return self._settings.unassigned_team_id, self._settings.unassigned_team_name
        if team_id == self._settings.unassigned_team_id:
            get_logger().warning(
                "Player %s is on team %r, which is also the unassigned bucket id; grouped as unassigned",
                profile.player_id, team_id,
            )
            return self._settings.unassigned_team_id, self._settings.unassigned_team_name
        team_name = (profile.team_name or "").strip() if profile else ""
        return team_id, team_name or team_id

    def group_by_team(
        self,
        standings: list[PlayerStanding],
        profiles: dict[str, PlayerProfile],
    ) -> list[_TeamGroup]:
        groups: dict[str, _TeamGroup] = {}
        for standing in standings:
            profile = profiles.get(standing.player_id)
            team_id, team_name = self.resolve_team(profile)
            display_name = (
                standing.display_name
                or (profile.display_name if profile else None)
                or standing.player_id
            )
            group = groups.setdefault(team_id, _TeamGroup(team_id, team_name))
            group.members.append(
                TeamMember(player_id=standing.player_id, display_name=display_name, total=standing.total),
            )

        for group in groups.values():
            group.members.sort(key=lambda m: (-m.total, m.display_name.casefold(), m.player_id))
        return sorted(groups.values(), key=lambda g: (-g.total, g.team_name.casefold(), g.team_id))

    @log_engine_call
    def rebuild(self, season_id: str, through_sequence: int) -> TeamStandingsRunReport:
        """Replace the season's team standings from the current player standings."""
        started_at = self._clock()
        events = load_events_through(self._store, season_id, through_sequence)
        through = events[-1]

        player_standings = self._load_player_standings(season_id)
        source_through = max((s.through_sequence for s in player_standings), default=None)
        if source_through is not None and source_through != through.sequence_number:
            get_logger().warning(
                "Team standings for %s built through #%d from player standings through #%d",
                season_id, through.sequence_number, source_through,
            )

        groups = self.group_by_team(player_standings, self._load_profiles())
        positions = assign_positions([g.total for g in groups])
        standings = [
            TeamStanding(
                team_id=g.team_id,
                team_name=g.team_name,
                total=g.total,
                position=position,
                members=g.members,
                through_event_id=through.event_id,
                through_sequence=through.sequence_number,
                computed_at=started_at,
                engine_version=self._settings.engine_version,
            )
            for g, position in zip(groups, positions)
        ]

        collection = paths.team_standings(season_id)
        removed = stale_deletes(self._store, collection, {s.team_id for s in standings})
        writes: list[Write] = [SetWrite(collection, s.team_id, s.to_document()) for s in standings]
        writes += [DeleteWrite(collection, team_id) for team_id in removed]

        report = commit_in_chunks(
            self._store, writes, batch_limit(self._store, self._settings.max_batch_writes),
        )

        finished_at = self._clock()
        run_id = new_run_id(RUN_TEAM_STANDINGS, started_at)
        run = RunRecord(
            run_id=run_id,
            kind=RUN_TEAM_STANDINGS,
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
            source_through_sequence=source_through,
        )
        audit: list[Write] = [SetWrite(paths.runs(season_id), run_id, run.to_document())]
        if report.ok:
            audit.append(SetWrite(paths.meta(season_id), META_KIND, meta.to_document()))
        report = commit_audit(self._store, audit, report)

        if not report.ok:
            raise PartialCommitError(report)

        get_logger().info(
            "Rebuilt %d team standings for %s through %s (#%d)",
            len(standings), season_id, through.event_id, through.sequence_number,
        )
        return TeamStandingsRunReport(
            run_id=run_id,
            season_id=season_id,
            through_event_id=through.event_id,
            through_sequence=through.sequence_number,
            source_through_sequence=source_through,
            standings=tuple(standings),
            removed=tuple(removed),
            commit=report,
        )
