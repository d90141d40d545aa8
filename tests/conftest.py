"""Shared fixtures: an in-memory store, seeding helpers and a redirected log file."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import pytest

import btcc_fantasy._logging as engine_logging
from btcc_fantasy.config import EngineSettings
from btcc_fantasy.exceptions import StoreAPIError
from btcc_fantasy.store import InMemoryDocumentStore, paths

SEASON = "2026"
FIXED_NOW = datetime(2026, 5, 10, 18, 30, tzinfo=timezone.utc)
RESULTS_SAVED_AT = datetime(2026, 5, 10, 17, 0, tzinfo=timezone.utc)


class FlakyStore(InMemoryDocumentStore):
    """In-memory store whose N-th commit calls (0-based) fail."""

    def __init__(self, fail_on: set[int] | None = None, max_batch_size: int = 500) -> None:
        super().__init__(max_batch_size=max_batch_size)
        self.fail_on = set(fail_on or ())
        self.commit_calls = 0

    def commit(self, writes):
        call = self.commit_calls
        self.commit_calls += 1
        if call in self.fail_on:
            raise StoreAPIError(503, "backend unavailable")
        return super().commit(writes)


class Seeder:
    """Writes league documents straight into a store."""

    def __init__(self, store: InMemoryDocumentStore, season: str = SEASON) -> None:
        self.store = store
        self.season = season

    def event(self, event_id: str, sequence: int, *, locked: bool = True, **fields: Any) -> None:
        data = {
            "sequenceNumber": sequence,
            "venue": f"Venue {sequence}",
            "status": "complete" if locked else "upcoming",
            "resultsLocked": locked,
        }
        data.update(fields)
        self.store.put(paths.events(self.season), event_id, data)

    def results(
        self,
        event_id: str,
        qualifying: list[str] | None = None,
        race1: list[str] | None = None,
        race2: list[str] | None = None,
        race3: list[str] | None = None,
        updated_at: datetime = RESULTS_SAVED_AT,
    ) -> None:
        self.store.put(paths.results(self.season), event_id, {
            "qualifying": qualifying or [],
            "race1": race1 or [],
            "race2": race2 or [],
            "race3": race3 or [],
            "updatedAt": updated_at,
        })

    def entry(
        self,
        event_id: str,
        player_id: str,
        drivers: Any,
        display_name: str | None = None,
        field: str = "driverIds",
    ) -> None:
        data: dict[str, Any] = {field: drivers}
        if display_name is not None:
            data["displayName"] = display_name
        self.store.put(paths.entries(self.season, event_id), player_id, data)

    def score(
        self,
        event_id: str,
        sequence: int,
        player_id: str,
        total: int,
        display_name: str = "",
    ) -> None:
        self.store.put(paths.scores(self.season, event_id), player_id, {
            "playerId": player_id,
            "eventId": event_id,
            "eventSequence": sequence,
            "displayName": display_name,
            "total": total,
            "race1": total,
            "engineVersion": "seed",
            "ruleset": "seed",
            "scoredAt": FIXED_NOW,
        })

    def profile(
        self,
        player_id: str,
        team_id: str | None = None,
        team_name: str | None = None,
        display_name: str | None = None,
    ) -> None:
        self.store.put(paths.players(), player_id, {
            "displayName": display_name,
            "teamId": team_id,
            "teamName": team_name,
        })


@pytest.fixture(autouse=True)
def engine_log(tmp_path):
    """Redirect the engine call log into tmp_path and reset the cached logger."""
    named_logger = logging.getLogger(engine_logging.LOGGER_NAME)
    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)

    old = engine_logging._logger, engine_logging._LOG_DIR, engine_logging._LOG_FILE
    log_dir = tmp_path / "logs"
    engine_logging._logger = None
    engine_logging._LOG_DIR = str(log_dir)
    engine_logging._LOG_FILE = str(log_dir / engine_logging.LOG_FILE_NAME)

    yield log_dir / engine_logging.LOG_FILE_NAME

    for h in named_logger.handlers[:]:
        h.close()
        named_logger.removeHandler(h)
    engine_logging._logger, engine_logging._LOG_DIR, engine_logging._LOG_FILE = old


@pytest.fixture
def settings(tmp_path) -> EngineSettings:
    return EngineSettings(engine_version="test-1", ruleset="btcc-linear-v1", log_dir=str(tmp_path))


@pytest.fixture
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def seed(store) -> Seeder:
    return Seeder(store)


@pytest.fixture
def clock():
    return lambda: FIXED_NOW
