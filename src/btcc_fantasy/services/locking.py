"""Lock State Machine for event results.

unlocked -> locked -> unlocked (with a reason) -> locked ... ; no terminal
state. Locking also marks the event complete.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from btcc_fantasy._logging import get_logger, log_engine_call
from btcc_fantasy.constants import STATUS_COMPLETE
from btcc_fantasy.exceptions import LockTransitionError
from btcc_fantasy.models import Event, LockState
from btcc_fantasy.services.common import load_event, utcnow
from btcc_fantasy.store import DocumentStore, SetWrite, paths


class EventLockService:
    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    def state(self, season_id: str, event_id: str) -> LockState:
        """Read the current lock state from the store (never cached)."""
        return load_event(self._store, season_id, event_id).lock_state

    def _save(self, season_id: str, event: Event) -> None:
        self._store.commit([SetWrite(paths.events(season_id), event.event_id, event.to_document())])

    @log_engine_call
    def lock(self, season_id: str, event_id: str, actor: str) -> Event:
        """Freeze results so the engine may score the event."""
        if not actor or not actor.strip():
            raise LockTransitionError("An actor is required to lock results")
        event = load_event(self._store, season_id, event_id)
        if event.results_locked:
            raise LockTransitionError(f"Event {event_id!r} is already locked")

        locked = event.model_copy(update={
            "results_locked": True,
            "status": STATUS_COMPLETE,
            "locked_by": actor.strip(),
            "locked_at": self._clock(),
        })
        self._save(season_id, locked)
        get_logger().info("Locked %s/%s by %s", season_id, event_id, actor)
        return locked

    @log_engine_call
    def unlock(self, season_id: str, event_id: str, actor: str, reason: str) -> Event:
        """Reopen results for editing; the reason is kept for audit."""
        if not actor or not actor.strip():
            raise LockTransitionError("An actor is required to unlock results")
        if not reason or not reason.strip():
            raise LockTransitionError("A reason is required to unlock results")
        event = load_event(self._store, season_id, event_id)
        if not event.results_locked:
            raise LockTransitionError(f"Event {event_id!r} is not locked")

        unlocked = event.model_copy(update={
            "results_locked": False,
            "unlocked_by": actor.strip(),
            "unlocked_at": self._clock(),
            "unlock_reason": reason.strip(),
        })
        self._save(season_id, unlocked)
        get_logger().info("Unlocked %s/%s by %s: %s", season_id, event_id, actor, reason.strip())
        return unlocked
