"""Position-indexed point tables (pure functions)."""

from __future__ import annotations

from btcc_fantasy.constants import (
    QUALIFYING,
    QUALIFYING_POINTS_POSITIONS,
    RACE_POINTS_POSITIONS,
    RACE_SESSIONS,
)


def _linear_points(position: int, positions_scored: int) -> int:
    if 1 <= position <= positions_scored:
        return positions_scored + 1 - position
    return 0


def race_points(position: int) -> int:
    """Return race points: 26 for 1st down to 1 for 26th, 0 otherwise."""
    return _linear_points(position, RACE_POINTS_POSITIONS)


def qualifying_points(position: int) -> int:
    """Return qualifying points: 6 for pole down to 1 for 6th, 0 otherwise."""
    return _linear_points(position, QUALIFYING_POINTS_POSITIONS)


def points_for_session(session: str, position: int) -> int:
    """Apply the table that belongs to *session* (qualifying or a race)."""
    if session == QUALIFYING:
        return qualifying_points(position)
    if session in RACE_SESSIONS:
        return race_points(position)
    raise ValueError(f"Unknown session: {session!r}")
