"""Saves official finishing orders, one session at a time."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime

from btcc_fantasy._logging import log_engine_call
from btcc_fantasy.constants import SESSIONS
from btcc_fantasy.exceptions import InvalidResultsError, ResultsLockedError
from btcc_fantasy.models import RaceResult
from btcc_fantasy.services.common import load_event, utcnow
from btcc_fantasy.store import DocumentStore, SetWrite, paths


def normalize_order(order: Sequence[str]) -> list[str]:
    """Return a cleaned finishing order, rejecting blanks and repeats."""
    if isinstance(order, str):
        raise InvalidResultsError("A finishing order must be a list of driver ids")
    cleaned = [str(driver_id).strip() if driver_id is not None else "" for driver_id in order]
    if not all(cleaned):
        raise InvalidResultsError("A finishing order cannot contain blank driver ids")
    if len(set(cleaned)) != len(cleaned):
        raise InvalidResultsError("A driver appears more than once in the finishing order")
    return cleaned


class ResultsEntryService:
    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    def get_results(self, season_id: str, event_id: str) -> RaceResult | None:
        data = self._store.get(paths.results(season_id), event_id)
        return RaceResult.from_document(event_id, data) if data is not None else None

    @log_engine_call
    def save_session(
        self,
        season_id: str,
        event_id: str,
        session: str,
        order: Sequence[str],
        actor: str,
    ) -> RaceResult:
        """Save one session's order; refused while the event is locked."""
        if session not in SESSIONS:
            raise InvalidResultsError(f"Unknown session {session!r}; expected one of {', '.join(SESSIONS)}")
        cleaned = normalize_order(order)

        event = load_event(self._store, season_id, event_id)
        if event.results_locked:
            raise ResultsLockedError(
                f"Results for event {event_id!r} are locked; unlock them with a reason first",
            )

        now = self._clock()
        current = self.get_results(season_id, event_id) or RaceResult(event_id=event_id)
        updated = current.model_copy(update={session: cleaned, "updated_at": now, "updated_by": actor})
        stamped = event.model_copy(update={"results_updated_at": now})

        self._store.commit([
            SetWrite(paths.results(season_id), event_id, updated.to_document()),
            SetWrite(paths.events(season_id), event_id, stamped.to_document()),
        ])
        return updated
