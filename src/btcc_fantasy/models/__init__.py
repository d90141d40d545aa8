"""Records read and written by the scoring engine."""

from btcc_fantasy.models._base import Record
from btcc_fantasy.models.entry import Entry
from btcc_fantasy.models.event import Event, LockState
from btcc_fantasy.models.profile import PlayerProfile
from btcc_fantasy.models.results import RaceResult
from btcc_fantasy.models.runs import RunRecord, StandingsMeta
from btcc_fantasy.models.scores import EventScore
from btcc_fantasy.models.standings import PlayerStanding, TeamMember, TeamStanding

__all__ = [
    "Entry",
    "Event",
    "EventScore",
    "LockState",
    "PlayerProfile",
    "PlayerStanding",
    "RaceResult",
    "Record",
    "RunRecord",
    "StandingsMeta",
    "TeamMember",
    "TeamStanding",
]
