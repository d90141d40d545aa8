"""Runs the three engine stages for one event, stopping at the first failure."""

from __future__ import annotations

from dataclasses import dataclass

from btcc_fantasy._logging import get_logger
from btcc_fantasy.config import EngineSettings
from btcc_fantasy.exceptions import FantasyEngineError
from btcc_fantasy.services.event_scores import EventScoreWriter, ScoreRunReport
from btcc_fantasy.services.player_standings import PlayerStandingsBuilder, StandingsRunReport
from btcc_fantasy.services.team_standings import TeamStandingsBuilder, TeamStandingsRunReport
from btcc_fantasy.store import DocumentStore


@dataclass(frozen=True)
class RefreshReport:
    scores: ScoreRunReport | None = None
    player_standings: StandingsRunReport | None = None
    team_standings: TeamStandingsRunReport | None = None
    failed_stage: str | None = None
    error: FantasyEngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_season_refresh(
    store: DocumentStore,
    season_id: str,
    event_id: str,
    settings: EngineSettings | None = None,
) -> RefreshReport:
    """Score *event_id*, then rebuild player and team standings through it.

    Stages are independent: a failure leaves earlier stages' output in
    place and is returned on the report rather than rolled back.
    """
    logger = get_logger()

    try:
        scores = EventScoreWriter(store, settings).score_event(season_id, event_id)
    except FantasyEngineError as exc:
        logger.error("Refresh stopped at event scores: %s", exc)
        return RefreshReport(failed_stage="event_scores", error=exc)

    through = scores.event_sequence
    try:
        players = PlayerStandingsBuilder(store, settings).rebuild(season_id, through)
    except FantasyEngineError as exc:
        logger.error("Refresh stopped at player standings: %s", exc)
        return RefreshReport(scores=scores, failed_stage="player_standings", error=exc)

    try:
        teams = TeamStandingsBuilder(store, settings).rebuild(season_id, through)
    except FantasyEngineError as exc:
        logger.error("Refresh stopped at team standings: %s", exc)
        return RefreshReport(
            scores=scores, player_standings=players, failed_stage="team_standings", error=exc,
        )

    return RefreshReport(scores=scores, player_standings=players, team_standings=teams)
