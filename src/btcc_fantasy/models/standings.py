"""Season-cumulative standings for players and fantasy teams."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from btcc_fantasy.models._base import Record


class PlayerStanding(Record):
    """Cumulative total for one player, bounded by a through-event."""

    id_field: ClassVar[str | None] = "player_id"

    player_id: str
    display_name: str = ""
    total: int = 0
    position: int = 0
    event_ids: list[str] = []
    events_counted: int = 0
    through_event_id: str
    through_sequence: int
    computed_at: datetime
    engine_version: str


class TeamMember(Record):
    player_id: str
    display_name: str = ""
    total: int = 0


class TeamStanding(Record):
    """Sum of member player totals for one fantasy team."""

    id_field: ClassVar[str | None] = "team_id"

    team_id: str
    team_name: str
    total: int = 0
    position: int = 0
    members: list[TeamMember] = []
    through_event_id: str
    through_sequence: int
    computed_at: datetime
    engine_version: str
