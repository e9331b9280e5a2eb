"""Win/loss streaks across every season a user has played.

Weekly outcomes are laid out on a single chronological line. Two recorded
weeks are adjacent when they are consecutive weeks of the same season, or the
last regular-season week of one year followed by week 1 of the next. Ties and
non-adjacent weeks break a streak.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from .core import Outcome, compare_points
from .models import Season

StreakType = Literal["win", "loss"]

def _target_outcome(streak_type: str) -> tuple[StreakType, Outcome]:
    if streak_type == "win":
        return "win", "W"
    if streak_type == "loss":
        return "loss", "L"
    raise ValueError(f"Unknown streak type: {streak_type!r}")


def format_week_label(week: int, year: int) -> str:
    return f"week {week}, {year}"


@dataclass(frozen=True, slots=True)
class WeekResult:
    year: int
    week: int
    outcome: Outcome
    points_for: float
    points_against: float


@dataclass(frozen=True, slots=True)
class StreakPoint:
    year: int
    week: int

    @property
    def label(self) -> str:
        return format_week_label(self.week, self.year)


@dataclass(frozen=True, slots=True)
class Streak:
    length: int
    start: StreakPoint
    end: StreakPoint
    type: StreakType


@dataclass(frozen=True, slots=True)
class WeekDetail:
    year: int
    week: int
    team_score: float
    opponent_score: float
    outcome: Outcome


def _current_season(seasons: Iterable[Season]) -> str | None:
    for s in seasons:
        if s.nfl_state.season:
            return s.nfl_state.season
    return None


def build_weekly_outcomes(
    user_id: str, seasons: Iterable[Season], current_season: str | None = None
) -> list[WeekResult]:
    """Chronological W/L/T results for ``user_id`` over completed seasons.

    ``current_season`` names the real-world season to leave out; by default
    it is read from the ``nfl_state`` the seasons were fetched with.
    """
    seasons = list(seasons)
    if current_season is None:
        current_season = _current_season(seasons)
    completed = sorted(
        (s for s in seasons if s.season != current_season), key=lambda s: s.year
    )

    results: list[WeekResult] = []
    for season in completed:
        if not season.matchup_info:
            continue
        roster = season.roster_for_user(user_id)
        if roster is None:
            continue
        for wm in season.played_weeks():
            mine = wm.find(roster.roster_id)
            if mine is None:
                continue
            opp = wm.opponent_of(mine)
            if opp is None:
                continue
            results.append(
                WeekResult(
                    year=season.year,
                    week=wm.week,
                    outcome=compare_points(mine.points, opp.points),
                    points_for=mine.points,
                    points_against=opp.points,
                )
            )
    results.sort(key=lambda r: (r.year, r.week))
    return results


def _last_regular_week_by_year(seasons: Iterable[Season]) -> dict[int, int]:
    out: dict[int, int] = {}
    for s in seasons:
        last = s.last_regular_week
        if last > 0:
            out[s.year] = last
    return out


def is_adjacent(prev: WeekResult, nxt: WeekResult, last_regular: dict[int, int]) -> bool:
    if prev.year == nxt.year:
        return nxt.week == prev.week + 1
    if nxt.year == prev.year + 1:
        last_prev = last_regular.get(prev.year)
        return last_prev is not None and prev.week == last_prev and nxt.week == 1
    return False


def longest_streaks(user_id: str, streak_type: str, seasons: Iterable[Season]) -> list[Streak]:
    """Every streak of ``streak_type`` tied for the longest, oldest first."""
    kind, target = _target_outcome(streak_type)
    seasons = list(seasons)
    weekly = build_weekly_outcomes(user_id, seasons)
    if not weekly:
        return []
    last_regular = _last_regular_week_by_year(seasons)

    best: list[Streak] = []
    max_len = 0
    cur_len = 0
    cur_start: WeekResult | None = None
    cur_end: WeekResult | None = None

    def finalize() -> None:
        nonlocal max_len, best
        if cur_start is None or cur_end is None or cur_len <= 0:
            return
        streak = Streak(
            length=cur_len,
            start=StreakPoint(cur_start.year, cur_start.week),
            end=StreakPoint(cur_end.year, cur_end.week),
            type=kind,
        )
        if cur_len > max_len:
            max_len = cur_len
            best = [streak]
        elif cur_len == max_len:
            best.append(streak)

    prev: WeekResult | None = None
    for r in weekly:
        if prev is not None and not is_adjacent(prev, r, last_regular):
            finalize()
            cur_len, cur_start, cur_end = 0, None, None
        if r.outcome == target:
            if cur_len == 0:
                cur_start = r
            cur_len += 1
            cur_end = r
        else:
            finalize()
            cur_len, cur_start, cur_end = 0, None, None
        prev = r
    finalize()
    return best


def current_streak(user_id: str, seasons: Iterable[Season]) -> Streak | None:
    """Active streak counted back from the latest recorded week.

    A most recent tie means there is no active streak. Gaps between recorded
    weeks are not checked here.
    """
    weekly = build_weekly_outcomes(user_id, seasons)
    streak_outcome: Outcome | None = None
    length = 0
    start: WeekResult | None = None
    end: WeekResult | None = None
    for r in reversed(weekly):
        if r.outcome == "T":
            break
        if streak_outcome is None:
            streak_outcome = r.outcome
            start = end = r
            length = 1
        elif r.outcome == streak_outcome:
            length += 1
            start = r
        else:
            break
    if streak_outcome is None or start is None or end is None:
        return None
    return Streak(
        length=length,
        start=StreakPoint(start.year, start.week),
        end=StreakPoint(end.year, end.week),
        type="win" if streak_outcome == "W" else "loss",
    )


def streak_week_details(user_id: str, streak: Streak, seasons: Iterable[Season]) -> list[WeekDetail]:
    """Weeks of ``streak`` plus the week that ended it, if one was played."""
    weekly = build_weekly_outcomes(user_id, seasons)
    index = {(w.year, w.week): i for i, w in enumerate(weekly)}
    start_idx = index.get((streak.start.year, streak.start.week))
    end_idx = index.get((streak.end.year, streak.end.week))
    if start_idx is None or end_idx is None:
        return []
    return [
        WeekDetail(
            year=w.year,
            week=w.week,
            team_score=w.points_for,
            opponent_score=w.points_against,
            outcome=w.outcome,
        )
        for w in weekly[start_idx : end_idx + 2]
    ]


def _all_user_ids(seasons: list[Season]) -> list[str]:
    seen: dict[str, None] = {}
    for s in sorted(seasons, key=lambda s: s.year):
        for u in s.users:
            seen.setdefault(u.user_id, None)
    return list(seen)


def all_current_streaks(seasons: Iterable[Season]) -> dict[str, Streak]:
    """Active streak per user; users without one are left out."""
    seasons = list(seasons)
    out: dict[str, Streak] = {}
    for uid in _all_user_ids(seasons):
        streak = current_streak(uid, seasons)
        if streak is not None:
            out[uid] = streak
    return out


def all_longest_streaks(streak_type: str, seasons: Iterable[Season]) -> dict[str, list[Streak]]:
    seasons = list(seasons)
    _target_outcome(streak_type)
    out: dict[str, list[Streak]] = {}
    for uid in _all_user_ids(seasons):
        streaks = longest_streaks(uid, streak_type, seasons)
        if streaks:
            out[uid] = streaks
    return out
