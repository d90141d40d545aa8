"""BTCC fantasy league scoring and standings engine."""

from btcc_fantasy.config import EngineSettings, get_settings
from btcc_fantasy.exceptions import (
    FantasyEngineError,
    InvalidResultsError,
    LockTransitionError,
    PartialCommitError,
    PreconditionError,
    PreconditionReason,
    ResultsLockedError,
    StoreError,
)
from btcc_fantasy.services import (
    EventLockService,
    EventScoreWriter,
    PlayerStandingsBuilder,
    ResultsEntryService,
    TeamStandingsBuilder,
    run_season_refresh,
)
from btcc_fantasy.store import DocumentStore, FirestoreRestStore, InMemoryDocumentStore

__all__ = [
    "DocumentStore",
    "EngineSettings",
    "EventLockService",
    "EventScoreWriter",
    "FantasyEngineError",
    "FirestoreRestStore",
    "InMemoryDocumentStore",
    "InvalidResultsError",
    "LockTransitionError",
    "PartialCommitError",
    "PlayerStandingsBuilder",
    "PreconditionError",
    "PreconditionReason",
    "ResultsEntryService",
    "ResultsLockedError",
    "StoreError",
    "TeamStandingsBuilder",
    "get_settings",
    "run_season_refresh",
]

__version__ = "1.0.0"
