"""Event (race weekend) model and its lock state."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import ClassVar

from pydantic import AliasChoices, Field

from btcc_fantasy.constants import EVENT_ORDER_FIELDS, STATUS_UPCOMING
from btcc_fantasy.models._base import Record


class LockState(str, Enum):
    """Whether an event's results are frozen for scoring."""

    UNLOCKED = "unlocked"
    LOCKED = "locked"


class Event(Record):
    """One race weekend, ordered within its season by ``sequence_number``."""

    id_field: ClassVar[str | None] = "event_id"

    event_id: str
    # Older event documents store the order as eventNo
    sequence_number: int = Field(validation_alias=AliasChoices("sequence_number", *EVENT_ORDER_FIELDS))
    venue: str | None = None
    name: str | None = None
    round_from: int | None = None
    round_to: int | None = None
    date_from: date | datetime | None = None
    date_to: date | datetime | None = None
    status: str = STATUS_UPCOMING
    results_locked: bool = False
    locked_by: str | None = None
    locked_at: datetime | None = None
    unlocked_by: str | None = None
    unlocked_at: datetime | None = None
    unlock_reason: str | None = None
    results_updated_at: datetime | None = None

    @property
    def title(self) -> str:
        return self.venue or self.name or "Unnamed"

    @property
    def rounds(self) -> str:
        """Round range label such as ``R1–3``, or an empty string."""
        if self.round_from and self.round_to:
            return f"R{self.round_from}–{self.round_to}"
        return ""

    @property
    def lock_state(self) -> LockState:
        return LockState.LOCKED if self.results_locked else LockState.UNLOCKED
