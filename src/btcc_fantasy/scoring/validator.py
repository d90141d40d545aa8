"""Roster extraction and validation.

Invalid rosters are data, not faults: they validate to an empty roster,
which scores zero in every session.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from btcc_fantasy.constants import ROSTER_FIELDS

DEFAULT_ROSTER_MIN = 3
DEFAULT_ROSTER_MAX = 6


def _normalize_driver_id(value: Any) -> str:
    """Return a trimmed driver id, or '' for values that are not ids."""
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int):
        return str(value)
    return ""


def extract_roster(document: Mapping[str, Any]) -> list[str]:
    """Return the roster from an entry document.

    The first known roster field that holds a list wins; an entry without
    one has an empty roster.
    """
    for field in ROSTER_FIELDS:
        value = document.get(field)
        if isinstance(value, (list, tuple)):
            return [_normalize_driver_id(v) for v in value]
    return []


def validate_roster(
    roster: Sequence[str],
    *,
    min_size: int = DEFAULT_ROSTER_MIN,
    max_size: int = DEFAULT_ROSTER_MAX,
) -> list[str]:
    """Return the deduplicated *roster* if it is a valid team selection, else [].

    Repeated ids are dropped (first occurrence kept) before the size check.
    A valid roster then has between ``min_size`` and ``max_size`` drivers,
    every id non-empty.
    """
    if isinstance(roster, str):
        return []
    drivers = [_normalize_driver_id(d) for d in roster]
    if not all(drivers):
        return []
    unique = list(dict.fromkeys(drivers))
    if not min_size <= len(unique) <= max_size:
        return []
    return unique
