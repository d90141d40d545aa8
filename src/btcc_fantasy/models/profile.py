"""Player profile, read for fantasy-team grouping."""

from __future__ import annotations

from typing import ClassVar

from btcc_fantasy.models._base import Record


class PlayerProfile(Record):
    id_field: ClassVar[str | None] = "player_id"

    player_id: str
    display_name: str | None = None
    team_id: str | None = None
    team_name: str | None = None
