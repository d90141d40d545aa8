"""Tests for config.py — environment-driven settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from btcc_fantasy.config import EngineSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("BTCC_MAX_BATCH_WRITES", "BTCC_ENGINE_VERSION", "BTCC_FIRESTORE_PROJECT"):
        monkeypatch.delenv(name, raising=False)


class TestEngineSettings:
    def test_defaults(self):
        settings = EngineSettings(_env_file=None)
        assert settings.max_batch_writes == 500
        assert settings.roster_min == 3
        assert settings.roster_max == 6
        assert settings.unassigned_team_id == "unassigned"
        assert settings.firestore_project is None
        assert settings.firestore_database == "(default)"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("BTCC_MAX_BATCH_WRITES", "50")
        monkeypatch.setenv("BTCC_ENGINE_VERSION", "2.1.0")

        settings = EngineSettings(_env_file=None)

        assert settings.max_batch_writes == 50
        assert settings.engine_version == "2.1.0"

    def test_rejects_zero_batch_size(self, monkeypatch):
        monkeypatch.setenv("BTCC_MAX_BATCH_WRITES", "0")
        with pytest.raises(ValidationError):
            EngineSettings(_env_file=None)
