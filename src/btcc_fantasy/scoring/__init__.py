"""Pure scoring rules: point tables, roster validation, event scoring."""

from btcc_fantasy.scoring.points import points_for_session, qualifying_points, race_points
from btcc_fantasy.scoring.scorer import ScoreBreakdown, score_roster
from btcc_fantasy.scoring.validator import extract_roster, validate_roster

__all__ = [
    "ScoreBreakdown",
    "extract_roster",
    "points_for_session",
    "qualifying_points",
    "race_points",
    "score_roster",
    "validate_roster",
]
