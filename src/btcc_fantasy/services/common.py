"""Helpers shared by the engine services (no store writes of their own)."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from datetime import datetime, timezone

from btcc_fantasy._logging import get_logger
from btcc_fantasy.constants import EVENT_ORDER_FIELDS
from btcc_fantasy.exceptions import PreconditionError, PreconditionReason, StoreError
from btcc_fantasy.models import Event
from btcc_fantasy.services.batching import CommitReport
from btcc_fantasy.store import DocumentStore, Write, paths


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_run_id(kind: str, started_at: datetime) -> str:
    """Return a sortable, unique audit record id."""
    return f"{started_at:%Y%m%dT%H%M%S}-{kind}-{uuid.uuid4().hex[:8]}"


def assign_positions(totals: Sequence[int]) -> list[int]:
    """Competition ranking for totals already sorted descending (1, 2, 2, 4)."""
    positions: list[int] = []
    for index, total in enumerate(totals):
        if index and total == totals[index - 1]:
            positions.append(positions[-1])
        else:
            positions.append(index + 1)
    return positions


def load_event(store: DocumentStore, season_id: str, event_id: str) -> Event:
    """Read an event fresh from the store."""
    data = store.get(paths.events(season_id), event_id)
    if data is None:
        raise PreconditionError(
            PreconditionReason.EVENT_NOT_FOUND,
            f"Event {event_id!r} does not exist in season {season_id!r}",
        )
    return Event.from_document(event_id, data)


def load_events_through(
    store: DocumentStore, season_id: str, through_sequence: int,
) -> list[Event]:
    """Return the season's events with sequence number <= *through_sequence*, in order.

    Events ordered by the older ``eventNo`` field are scanned too.
    """
    by_id: dict[str, Event] = {}
    for field in EVENT_ORDER_FIELDS:
        for doc in store.query_ordered(paths.events(season_id), field, lte=through_sequence):
            event = Event.from_document(doc.id, doc.data)
            # A document carrying both fields is ordered by the canonical one
            if event.sequence_number <= through_sequence:
                by_id.setdefault(doc.id, event)
    events = sorted(by_id.values(), key=lambda e: (e.sequence_number, e.event_id))
    if not events:
        raise PreconditionError(
            PreconditionReason.NO_EVENTS,
            f"No events in season {season_id!r} with sequence number <= {through_sequence}",
        )
    return events


def stale_deletes(
    store: DocumentStore, collection: str, keep: set[str],
) -> list[str]:
    """Return ids of documents in *collection* that a full replace must remove."""
    return [doc.id for doc in store.list_documents(collection) if doc.id not in keep]


def commit_audit(
    store: DocumentStore, writes: Sequence[Write], report: CommitReport,
) -> CommitReport:
    """Write audit records in one commit, noting a failure on the report."""
    try:
        store.commit(writes)
    except StoreError as exc:
        get_logger().error("Audit write failed: %s: %s", type(exc).__name__, exc)
        return report.without_audit()
    return report
