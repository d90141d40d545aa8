"""Shared constants for the scoring engine."""

from __future__ import annotations

# Session keys, in scoring order
QUALIFYING = "qualifying"
RACE_1 = "race1"
RACE_2 = "race2"
RACE_3 = "race3"

SESSIONS: tuple[str, ...] = (QUALIFYING, RACE_1, RACE_2, RACE_3)
RACE_SESSIONS: frozenset[str] = frozenset({RACE_1, RACE_2, RACE_3})

# Point tables: linear from the top position down to 1 point
RACE_POINTS_POSITIONS = 26
QUALIFYING_POINTS_POSITIONS = 6

# Entry fields a roster has been stored under, canonical name first
ROSTER_FIELDS: tuple[str, ...] = ("driverIds", "drivers", "driverIDs", "roster", "team", "picks")

# Event fields holding the season order, canonical name first
EVENT_ORDER_FIELDS: tuple[str, ...] = ("sequenceNumber", "eventNo")

# Event lifecycle
STATUS_UPCOMING = "upcoming"
STATUS_COMPLETE = "complete"

# Audit run kinds
RUN_EVENT_SCORES = "event_scores"
RUN_PLAYER_STANDINGS = "player_standings"
RUN_TEAM_STANDINGS = "team_standings"

# Hosted document store commit limit
DEFAULT_MAX_BATCH_WRITES = 500
