"""Service layer: the scoring and standings engine."""

from btcc_fantasy.services.batching import ChunkFailure, CommitReport, chunked, commit_in_chunks
from btcc_fantasy.services.common import assign_positions
from btcc_fantasy.services.event_scores import EventScoreWriter, ScoreRunReport
from btcc_fantasy.services.locking import EventLockService
from btcc_fantasy.services.pipeline import RefreshReport, run_season_refresh
from btcc_fantasy.services.player_standings import (
    PlayerStandingsBuilder,
    StandingsRunReport,
    accumulate_scores,
)
from btcc_fantasy.services.results_entry import ResultsEntryService, normalize_order
from btcc_fantasy.services.team_standings import TeamStandingsBuilder, TeamStandingsRunReport

__all__ = [
    "ChunkFailure",
    "CommitReport",
    "EventLockService",
    "EventScoreWriter",
    "PlayerStandingsBuilder",
    "RefreshReport",
    "ResultsEntryService",
    "ScoreRunReport",
    "StandingsRunReport",
    "TeamStandingsBuilder",
    "TeamStandingsRunReport",
    "accumulate_scores",
    "assign_positions",
    "chunked",
    "commit_in_chunks",
    "normalize_order",
    "run_season_refresh",
]
