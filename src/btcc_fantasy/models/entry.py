"""A player's team selection for one event."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar, Self

from pydantic import field_validator

from btcc_fantasy.models._base import Record
from btcc_fantasy.scoring.validator import extract_roster


class Entry(Record):
    """Persisted roster for one (event, player) pair.

    Display-only fields fall back to defaults when unreadable, so one
    malformed entry never blocks scoring the rest of the event.
    """

    id_field: ClassVar[str | None] = "player_id"

    player_id: str
    event_id: str
    display_name: str = ""
    driver_ids: list[str] = []
    submitted_at: datetime | None = None

    @field_validator("display_name", mode="before")
    @classmethod
    def _coerce_display_name(cls, value: Any) -> str:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return ""

    @field_validator("submitted_at", mode="before")
    @classmethod
    def _coerce_submitted_at(cls, value: Any) -> datetime | None:
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        return None

    @classmethod
    def from_document(cls, doc_id: str, data: dict[str, Any], **extra: Any) -> Self:
        # Older entries stored the roster under other field names
        payload = {k: v for k, v in data.items() if k != "driverIds"}
        payload["driverIds"] = extract_roster(data)
        return super().from_document(doc_id, payload, **extra)
