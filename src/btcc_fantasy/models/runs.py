"""Audit records written by every engine invocation."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar

from btcc_fantasy.models._base import Record


class RunRecord(Record):
    """One engine invocation: what it read, what it wrote, what failed."""

    id_field: ClassVar[str | None] = "run_id"

    run_id: str
    kind: str
    season_id: str
    event_id: str | None = None
    entry_count: int | None = None
    results_updated_at: datetime | None = None
    through_event_id: str | None = None
    through_sequence: int | None = None
    event_count: int | None = None
    write_count: int = 0
    chunk_count: int = 0
    failed_chunks: list[int] = []
    engine_version: str
    ruleset: str | None = None
    started_at: datetime
    finished_at: datetime


class StandingsMeta(Record):
    """Season-level marker of the last standings rebuild of one kind."""

    id_field: ClassVar[str | None] = "kind"

    kind: str
    last_rebuild_at: datetime
    through_event_id: str
    through_sequence: int
    event_count: int
    record_count: int
    engine_version: str
    # Threshold of the player standings a team rebuild read from
    source_through_sequence: int | None = None
