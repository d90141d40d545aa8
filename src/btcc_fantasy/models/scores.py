"""Engine-produced score for one (event, player) pair."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from btcc_fantasy.models._base import Record


class EventScore(Record):
    """Point breakdown for one player at one event.

    Replaced as a whole on every scoring run; never hand-edited.
    """

    id_field: ClassVar[str | None] = "player_id"

    player_id: str
    event_id: str
    event_sequence: int
    display_name: str = ""
    roster: list[str] = []
    roster_valid: bool = False
    qualifying: int = 0
    race1: int = 0
    race2: int = 0
    race3: int = 0
    total: int = 0
    # session -> driver id -> points
    breakdown: dict[str, dict[str, int]] = {}
    results_updated_at: datetime | None = None
    engine_version: str
    ruleset: str
    scored_at: datetime
