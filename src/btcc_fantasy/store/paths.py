"""Collection paths for every record kind the engine touches."""

from __future__ import annotations


def _segment(value: str) -> str:
    if not value or "/" in value:
        raise ValueError(f"Invalid path segment: {value!r}")
    return value


def players() -> str:
    return "players"


def events(season_id: str) -> str:
    return f"seasons/{_segment(season_id)}/events"


def results(season_id: str) -> str:
    return f"seasons/{_segment(season_id)}/results"


def entries(season_id: str, event_id: str) -> str:
    return f"{events(season_id)}/{_segment(event_id)}/entries"


def scores(season_id: str, event_id: str) -> str:
    return f"{events(season_id)}/{_segment(event_id)}/scores"


def player_standings(season_id: str) -> str:
    return f"seasons/{_segment(season_id)}/playerStandings"


def team_standings(season_id: str) -> str:
    return f"seasons/{_segment(season_id)}/teamStandings"


def runs(season_id: str) -> str:
    return f"seasons/{_segment(season_id)}/runs"


def meta(season_id: str) -> str:
    return f"seasons/{_segment(season_id)}/meta"
