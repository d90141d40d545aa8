"""Engine settings loaded from the environment (``BTCC_*``) or a ``.env`` file."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from btcc_fantasy.constants import DEFAULT_MAX_BATCH_WRITES

_DEFAULT_LOG_DIR = os.path.join(os.getcwd(), "logs")


class EngineSettings(BaseSettings):
    """Runtime configuration for the scoring engine and its store."""

    model_config = SettingsConfigDict(
        env_prefix="BTCC_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Engine
    engine_version: str = Field(default="1.0.0", description="Stamped on every engine-produced record")
    ruleset: str = Field(default="btcc-linear-v1", description="Point-rule tag stamped on event scores")
    max_batch_writes: int = Field(
        default=DEFAULT_MAX_BATCH_WRITES,
        ge=1,
        description="Upper bound on writes per atomic commit",
    )
    roster_min: int = Field(default=3, ge=1)
    roster_max: int = Field(default=6, ge=1)
    unassigned_team_id: str = "unassigned"
    unassigned_team_name: str = "Unassigned"

    # Logging
    log_dir: str = Field(default=_DEFAULT_LOG_DIR, description="Directory for engine_calls.log")

    # Hosted document store
    firestore_project: str | None = None
    firestore_database: str = "(default)"
    firestore_base_url: str = "https://firestore.googleapis.com/v1"
    firestore_timeout: float = Field(default=30.0, gt=0)
    firestore_token: str | None = None


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    """Return the process-wide settings instance."""
    return EngineSettings()
