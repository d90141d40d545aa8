"""Official finishing orders for one event."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from pydantic import field_validator

from btcc_fantasy.constants import SESSIONS
from btcc_fantasy.models._base import Record


class RaceResult(Record):
    """Finishing order per session; index 0 is first place.

    A driver absent from an order did not start or finish that session.
    """

    id_field: ClassVar[str | None] = "event_id"

    event_id: str
    qualifying: list[str] = []
    race1: list[str] = []
    race2: list[str] = []
    race3: list[str] = []
    updated_at: datetime | None = None
    updated_by: str | None = None

    @field_validator("qualifying", "race1", "race2", "race3", mode="before")
    @classmethod
    def _coerce_order(cls, value: Any) -> list[str]:
        # Sessions not yet saved are stored as null
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            raise ValueError("finishing order must be a list of driver ids")
        return [str(driver_id).strip() for driver_id in value if driver_id is not None]

    def order(self, session: str) -> list[str]:
        """Return the finishing order for a session key."""
        if session not in SESSIONS:
            raise KeyError(session)
        return getattr(self, session)

    def orders(self) -> dict[str, list[str]]:
        return {session: self.order(session) for session in SESSIONS}
