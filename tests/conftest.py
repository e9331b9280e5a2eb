from __future__ import annotations

import pytest

from ffstats.compute.models import Matchup, NflState, Roster, Season, User, WeekMatchups

# 4-team round robin: week -> [(roster_a, roster_b), ...]
PAIRINGS = [
    [(1, 2), (3, 4)],
    [(1, 3), (2, 4)],
    [(1, 4), (2, 3)],
]


def round_robin(points: dict[int, list[float]]) -> dict[int, list[tuple[int, int | None, float]]]:
    """Weekly rows for a 4-team league from per-roster weekly scores."""
    n_weeks = len(next(iter(points.values())))
    weeks: dict[int, list[tuple[int, int | None, float]]] = {}
    for i in range(n_weeks):
        rows = []
        for mid, (a, b) in enumerate(PAIRINGS[i % len(PAIRINGS)], start=1):
            rows.append((a, mid, points[a][i]))
            rows.append((b, mid, points[b][i]))
        weeks[i + 1] = rows
    return weeks


def build_season(
    weeks: dict[int, list[tuple[int, int | None, float]]] | None,
    *,
    season: str = "2023",
    playoff_week_start: int = 15,
    state: tuple[str, int, str] = ("2024", 1, "regular"),
    roster_ids: list[int] | None = None,
    records: dict[int, tuple[int, int, int]] | None = None,
) -> Season:
    """Season whose rosters report the record their regular-season games produce."""
    nfl_state = NflState(*state)
    if roster_ids is None:
        roster_ids = sorted({rid for rows in (weeks or {}).values() for rid, _, _ in rows})
    matchup_info = None
    if weeks is not None:
        matchup_info = tuple(
            WeekMatchups(wk, tuple(Matchup(rid, mid, pts) for rid, mid, pts in rows))
            for wk, rows in sorted(weeks.items())
        )

    in_progress = nfl_state.season == season and nfl_state.season_type != "post"
    tallies = {rid: [0, 0, 0, 0.0, 0.0] for rid in roster_ids}
    for wm in matchup_info or ():
        if wm.week >= playoff_week_start or (in_progress and wm.week >= nfl_state.week):
            continue
        for m in wm.matchups:
            opp = wm.opponent_of(m)
            if opp is None or m.roster_id not in tallies:
                continue
            t = tallies[m.roster_id]
            t[0 if m.points > opp.points else 1 if m.points < opp.points else 2] += 1
            t[3] += m.points
            t[4] += opp.points

    rosters = []
    for rid in roster_ids:
        w, l, t, pf, pa = tallies[rid]
        if records and rid in records:
            w, l, t = records[rid]
        rosters.append(Roster(rid, f"u{rid}", w, l, t, round(pf, 2), round(pa, 2)))
    users = tuple(User(f"u{rid}", f"Owner {rid}", f"Team {rid}") for rid in roster_ids)
    return Season(
        season=season,
        playoff_week_start=playoff_week_start,
        nfl_state=nfl_state,
        rosters=tuple(rosters),
        users=users,
        matchup_info=matchup_info,
    )


@pytest.fixture
def make_season():
    return build_season


@pytest.fixture
def make_round_robin():
    return round_robin


@pytest.fixture
def complete_season():
    # Team 1 outscores everybody every week; 2 > 3 > 4 otherwise
    points = {
        1: [150.0, 140.0, 145.0, 160.0],
        2: [120.0, 110.0, 115.0, 100.0],
        3: [100.0, 105.0, 90.0, 95.0],
        4: [80.0, 85.0, 95.0, 70.0],
    }
    return build_season(round_robin(points), playoff_week_start=5)
