"""Per-entry event scoring."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from btcc_fantasy.constants import SESSIONS
from btcc_fantasy.scoring.points import points_for_session


@dataclass(frozen=True)
class ScoreBreakdown:
    total: int
    subtotals: dict[str, int]
    # session -> driver id -> points
    per_driver: dict[str, dict[str, int]] = field(default_factory=dict)

    def subtotal(self, session: str) -> int:
        return self.subtotals.get(session, 0)


def _positions(order: Sequence[str]) -> dict[str, int]:
    """Map driver id to 1-based finishing position (first occurrence wins)."""
    positions: dict[str, int] = {}
    for index, driver_id in enumerate(order):
        positions.setdefault(driver_id, index + 1)
    return positions


def score_roster(
    roster: Sequence[str],
    orders: Mapping[str, Sequence[str]],
) -> ScoreBreakdown:
    """Score a validated roster against the four session finishing orders.

    A driver missing from a session's order earns 0 for that session only.
    An empty roster scores 0 everywhere.
    """
    subtotals: dict[str, int] = {}
    per_driver: dict[str, dict[str, int]] = {}

    for session in SESSIONS:
        positions = _positions(orders.get(session) or ())
        driver_points: dict[str, int] = {}
        for driver_id in roster:
            position = positions.get(driver_id)
            driver_points[driver_id] = (
                points_for_session(session, position) if position is not None else 0
            )
        per_driver[session] = driver_points
        subtotals[session] = sum(driver_points.values())

    return ScoreBreakdown(
        total=sum(subtotals.values()),
        subtotals=subtotals,
        per_driver=per_driver,
    )
