"""Basic usage: enter results, lock the event and refresh the season."""

from btcc_fantasy import (
    EventLockService,
    InMemoryDocumentStore,
    ResultsEntryService,
    run_season_refresh,
)
from btcc_fantasy.store import paths

SEASON = "2026"


def seed(store: InMemoryDocumentStore) -> None:
    store.put(paths.events(SEASON), "brands-hatch-indy", {
        "sequenceNumber": 1,
        "venue": "Brands Hatch Indy",
        "roundFrom": 1,
        "roundTo": 3,
    })
    rosters = {
        "alex": ["116", "1", "27"],
        "bea": ["80", "2", "33", "18"],
        "cal": ["116", "116", "4"],  # two distinct drivers, scores zero
    }
    for player_id, drivers in rosters.items():
        store.put(paths.entries(SEASON, "brands-hatch-indy"), player_id, {
            "displayName": player_id.title(),
            "driverIds": drivers,
        })
        store.put(paths.players(), player_id, {"teamId": "north", "teamName": "North Stand"})


def main() -> None:
    store = InMemoryDocumentStore()
    seed(store)

    results = ResultsEntryService(store)
    results.save_session(SEASON, "brands-hatch-indy", "qualifying", ["1", "116", "80", "27", "2", "33"], "marshal")
    results.save_session(SEASON, "brands-hatch-indy", "race1", ["116", "1", "80", "2", "27", "33", "18"], "marshal")
    results.save_session(SEASON, "brands-hatch-indy", "race2", ["80", "116", "27", "1", "18", "2"], "marshal")
    results.save_session(SEASON, "brands-hatch-indy", "race3", ["27", "2", "116", "33", "1", "80"], "marshal")

    EventLockService(store).lock(SEASON, "brands-hatch-indy", "marshal")
    report = run_season_refresh(store, SEASON, "brands-hatch-indy")
    if not report.ok:
        print(f"Refresh stopped at {report.failed_stage}: {report.error}")
        return

    print("=== Event scores ===")
    for score in report.scores.scores:
        flag = "" if score.roster_valid else " (invalid roster)"
        print(f"  {score.display_name:<6} {score.total:>4}{flag}")

    print("\n=== Player standings ===")
    for standing in report.player_standings.standings:
        print(f"  {standing.position:>2}. {standing.display_name:<6} {standing.total:>4}")

    print("\n=== Team standings ===")
    for team in report.team_standings.standings:
        print(f"  {team.position:>2}. {team.team_name} {team.total}")


if __name__ == "__main__":
    main()
