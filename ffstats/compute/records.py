"""Season record calculations.

Every function here is a pure read over a :class:`Season`. Missing data never
raises: a week without a resolvable entry or opponent is skipped, and a season
without matchup data yields ``Record(0, 0, 0)``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from .core import compare_points
from .models import Record, Season


def _tally(record: Record, mine: float, theirs: float) -> Record:
    outcome = compare_points(mine, theirs)
    if outcome == "W":
        return Record(record.wins + 1, record.losses, record.ties)
    if outcome == "L":
        return Record(record.wins, record.losses + 1, record.ties)
    return Record(record.wins, record.losses, record.ties + 1)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _other_user_ids(team_id: str, season: Season) -> list[str]:
    return [u.user_id for u in season.users if u.user_id != team_id]


def schedule_record(team_id: str, schedule_id: str, season: Season) -> Record:
    """Record ``team_id`` would have with ``schedule_id``'s weekly opponents.

    When both ids match the roster's own reported record is returned instead
    of recomputing it from matchups.
    """
    if not season.matchup_info:
        return Record()

    if team_id == schedule_id:
        roster = season.roster_for_user(team_id)
        return roster.record if roster else Record()

    team_roster = season.roster_for_user(team_id)
    sched_roster = season.roster_for_user(schedule_id)
    if team_roster is None or sched_roster is None:
        return Record()

    record = Record()
    for wm in season.played_weeks():
        mine = wm.find(team_roster.roster_id)
        theirs = wm.find(sched_roster.roster_id)
        if mine is None or theirs is None:
            continue
        if mine.matchup_id is not None and mine.matchup_id == theirs.matchup_id:
            # The schedule owner's opponent is the team itself
            record = _tally(record, mine.points, theirs.points)
            continue
        opp = wm.opponent_of(theirs)
        if opp is None:
            continue
        record = _tally(record, mine.points, opp.points)
    return record


def record_as_of_week(team_id: str, as_of_week: int, season: Season) -> Record:
    """Actual record from games played strictly before ``as_of_week``."""
    if not season.matchup_info:
        return Record()
    roster = season.roster_for_user(team_id)
    if roster is None:
        return Record()

    record = Record()
    for wm in season.played_weeks():
        if wm.week >= as_of_week:
            continue
        mine = wm.find(roster.roster_id)
        if mine is None:
            continue
        opp = wm.opponent_of(mine)
        if opp is None:
            continue
        record = _tally(record, mine.points, opp.points)
    return record


def record_against_league(team_id: str, season: Season) -> Record:
    """How the team would have fared against every other team's schedule."""
    return sum(
        (schedule_record(team_id, other, season) for other in _other_user_ids(team_id, season)),
        Record(),
    )


def league_record_at_schedule(team_id: str, season: Season) -> Record:
    """How every other team would have fared against this team's schedule."""
    return sum(
        (schedule_record(other, team_id, season) for other in _other_user_ids(team_id, season)),
        Record(),
    )


def _average(total: Record, count: int) -> Record:
    if count <= 0:
        return Record()
    return Record(
        _round_half_up(total.wins / count),
        _round_half_up(total.losses / count),
        _round_half_up(total.ties / count),
    )


def average_record_against_league(team_id: str, season: Season) -> Record:
    return _average(
        record_against_league(team_id, season), len(_other_user_ids(team_id, season))
    )


def average_league_record_at_schedule(team_id: str, season: Season) -> Record:
    return _average(
        league_record_at_schedule(team_id, season), len(_other_user_ids(team_id, season))
    )


def record_in_top_half(team_id: str, season: Season) -> Record:
    """Weekly all-play split: a win for a top-half score, a loss otherwise.

    A week in which the team has no entry is counted as a tie.
    """
    if not season.matchup_info:
        return Record()
    roster = season.roster_for_user(team_id)
    roster_id = roster.roster_id if roster else None

    record = Record()
    for wm in season.played_weeks():
        ranked = sorted(wm.matchups, key=lambda m: -m.points)
        idx = next((i for i, m in enumerate(ranked) if m.roster_id == roster_id), -1)
        if idx == -1:
            record = Record(record.wins, record.losses, record.ties + 1)
        elif idx < len(ranked) / 2:
            record = Record(record.wins + 1, record.losses, record.ties)
        else:
            record = Record(record.wins, record.losses + 1, record.ties)
    return record


def records_in_top_half(season: Season) -> dict[str, Record]:
    return {u.user_id: record_in_top_half(u.user_id, season) for u in season.users}


def record_against_winning_teams(team_id: str, season: Season) -> Record:
    """Actual results against opponents whose final roster record is above .500."""
    if not season.matchup_info or not season.rosters:
        return Record()
    roster = season.roster_for_user(team_id)
    if roster is None:
        return Record()
    winning = {r.roster_id for r in season.rosters if r.wins > r.losses}

    record = Record()
    for wm in season.played_weeks():
        mine = wm.find(roster.roster_id)
        if mine is None:
            continue
        opp = wm.opponent_of(mine)
        if opp is None or opp.roster_id not in winning:
            continue
        record = _tally(record, mine.points, opp.points)
    return record


def season_place(team_id: str, season: Season) -> int:
    """1-based finish by reported wins then points-for; 0 when the team has no roster."""
    ordered = sorted(
        (r for r in season.rosters if r.owner_id is not None),
        key=lambda r: (-r.wins, -r.points_for),
    )
    for idx, r in enumerate(ordered):
        if r.owner_id == team_id:
            return idx + 1
    return 0


@dataclass(frozen=True, slots=True)
class StandingsRow:
    user_id: str
    week: int
    rank: int
    record: Record
    points_for: float
    points_against: float


def standings_snapshot(season: Season, as_of_week: int) -> list[StandingsRow]:
    """League table as it stood entering ``as_of_week``."""
    totals: dict[str, tuple[Record, float, float]] = {}
    for user in season.users:
        roster = season.roster_for_user(user.user_id)
        if roster is None:
            continue
        pf = pa = 0.0
        for wm in season.played_weeks():
            if wm.week >= as_of_week:
                continue
            mine = wm.find(roster.roster_id)
            opp = wm.opponent_of(mine) if mine else None
            if mine is None or opp is None:
                continue
            pf += mine.points
            pa += opp.points
        totals[user.user_id] = (
            record_as_of_week(user.user_id, as_of_week, season),
            round(pf, 2),
            round(pa, 2),
        )

    ordered = sorted(totals.items(), key=lambda kv: (-kv[1][0].wins, -kv[1][1], kv[0]))
    return [
        StandingsRow(
            user_id=uid,
            week=as_of_week,
            rank=idx + 1,
            record=rec,
            points_for=pf,
            points_against=pa,
        )
        for idx, (uid, (rec, pf, pa)) in enumerate(ordered)
    ]
