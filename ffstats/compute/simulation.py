"""Monte-Carlo projection of final regular-season standings.

Each trial starts every team from its reported record, plays out the weeks
that remain before the playoffs with a points-share win probability, and ranks
the league by wins then points-for. The loop is a generator so a single
threaded host can resume it in slices; see :func:`iter_simulation`.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, Generator, Literal

from ffstats.constants import DEFAULT_TRIALS, DEFAULT_YIELD_EVERY, DEFAULT_PLAYOFF_SPOTS, TRAILING_WEEKS

from .core import paired_rows
from .models import Record, Season
from .records import schedule_record

logger = logging.getLogger(__name__)

PointsModel = Literal["season", "last3"]


class SimulationCancelled(Exception):
    """Raised when the caller asks a running simulation to stop."""


def _weekly_points(season: Season) -> dict[str, list[float]]:
    out: dict[str, list[float]] = {}
    for user in season.users:
        roster = season.roster_for_user(user.user_id)
        if roster is None:
            continue
        scores = []
        for wm in season.played_weeks():
            mine = wm.find(roster.roster_id)
            if mine is not None:
                scores.append(mine.points)
        out[user.user_id] = scores
    return out


def season_average_points(season: Season) -> dict[str, float]:
    return {
        uid: (sum(scores) / len(scores) if scores else 0.0)
        for uid, scores in _weekly_points(season).items()
    }


def trailing_average_points(season: Season, weeks: int = TRAILING_WEEKS) -> dict[str, float]:
    out: dict[str, float] = {}
    for uid, scores in _weekly_points(season).items():
        recent = scores[-weeks:] if weeks > 0 else []
        out[uid] = sum(recent) / len(recent) if recent else 0.0
    return out


def points_map(season: Season, points_model: str) -> dict[str, float]:
    if points_model == "season":
        return season_average_points(season)
    if points_model == "last3":
        return trailing_average_points(season)
    raise ValueError(f"Unknown points model: {points_model!r}")


def win_probability(avg_a: float, avg_b: float) -> float:
    total = avg_a + avg_b
    if total <= 0:
        return 0.5
    return avg_a / total


@dataclass(frozen=True, slots=True)
class SimulationProgress:
    completed: int
    total: int

    @property
    def fraction(self) -> float:
        return self.completed / self.total if self.total else 1.0


@dataclass(slots=True)
class SimulationAccumulator:
    """Trial counts per team: final place (1..N), final win total and final W-L-T."""

    trials: int
    placements: dict[str, dict[int, int]] = field(default_factory=dict)
    wins: dict[str, dict[int, int]] = field(default_factory=dict)
    records: dict[str, dict[Record, int]] = field(default_factory=dict)

    def placement_pct(self, user_id: str, place: int) -> float:
        count = self.placements.get(user_id, {}).get(place, 0)
        return count * 100 / self.trials if self.trials else 0.0

    def win_pct(self, user_id: str, wins: int) -> float:
        count = self.wins.get(user_id, {}).get(wins, 0)
        return count * 100 / self.trials if self.trials else 0.0

    def playoff_count(self, user_id: str, spots: int = DEFAULT_PLAYOFF_SPOTS) -> int:
        places = self.placements.get(user_id, {})
        return sum(c for place, c in places.items() if place <= spots)

    def playoff_pct(self, user_id: str, spots: int = DEFAULT_PLAYOFF_SPOTS) -> float:
        if not self.trials:
            return 0.0
        return self.playoff_count(user_id, spots) * 100 / self.trials


def remaining_weeks(season: Season) -> list[int]:
    if not season.is_in_progress:
        return []
    return list(range(season.nfl_state.week, season.playoff_week_start))


def iter_simulation(
    season: Season,
    trials: int = DEFAULT_TRIALS,
    points_model: str = "season",
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
    yield_every: int = DEFAULT_YIELD_EVERY,
    should_cancel: Callable[[], bool] | None = None,
) -> Generator[SimulationProgress, None, SimulationAccumulator]:
    """Run ``trials`` season simulations, yielding progress every ``yield_every`` trials.

    The finished :class:`SimulationAccumulator` is the generator's return
    value. ``should_cancel`` is polled at every yield point; when it returns
    true :class:`SimulationCancelled` is raised and nothing is returned.
    """
    if trials <= 0:
        raise ValueError("trials must be positive")
    if yield_every <= 0:
        raise ValueError("yield_every must be positive")
    averages = points_map(season, points_model)
    rng = rng or random.Random(seed)

    team_ids: list[str] = []
    base: list[tuple[int, int, int]] = []
    points_for: list[float] = []
    for user in season.users:
        roster = season.roster_for_user(user.user_id)
        if roster is None:
            continue
        rec = schedule_record(user.user_id, user.user_id, season)
        team_ids.append(user.user_id)
        base.append((rec.wins, rec.losses, rec.ties))
        points_for.append(roster.points_for)
    index = {uid: i for i, uid in enumerate(team_ids)}

    games: list[tuple[int, int, float]] = []
    for wk in remaining_weeks(season):
        wm = season.week(wk)
        if wm is None:
            continue
        for a, b in paired_rows(wm.matchups):
            ua, ub = season.user_for_roster(a.roster_id), season.user_for_roster(b.roster_id)
            if ua is None or ub is None or ua.user_id not in index or ub.user_id not in index:
                continue
            p = win_probability(averages.get(ua.user_id, 0.0), averages.get(ub.user_id, 0.0))
            games.append((index[ua.user_id], index[ub.user_id], p))

    n = len(team_ids)
    max_wins = max([season.last_regular_week, *(w for w, _, _ in base), 0]) + 1
    place_counts = [[0] * n for _ in range(n)]
    win_counts = [[0] * max_wins for _ in range(n)]
    record_counts: list[dict[tuple[int, int, int], int]] = [{} for _ in range(n)]
    logger.debug(
        "simulating season %s: %d teams, %d remaining games, %d trials (%s)",
        season.season, n, len(games), trials, points_model,
    )

    def credit(tally: list[list[int]], times: int) -> None:
        order = sorted(range(n), key=lambda i: (-tally[i][0], -points_for[i]))
        for place, i in enumerate(order):
            place_counts[i][place] += times
            key = (tally[i][0], tally[i][1], tally[i][2])
            w = key[0]
            record_counts[i][key] = record_counts[i].get(key, 0) + times
            if w >= len(win_counts[i]):
                win_counts[i].extend([0] * (w + 1 - len(win_counts[i])))
            win_counts[i][w] += times

    if not games:
        # Nothing left to play: every trial ends in the same table
        credit([list(r) for r in base], trials)
        if should_cancel is not None and should_cancel():
            raise SimulationCancelled(f"cancelled after {trials} trials")
        yield SimulationProgress(trials, trials)
    else:
        for done in range(1, trials + 1):
            tally = [list(r) for r in base]
            for ia, ib, p in games:
                r = rng.random()
                if r < p:
                    tally[ia][0] += 1
                    tally[ib][1] += 1
                elif r > p:
                    tally[ib][0] += 1
                    tally[ia][1] += 1
                else:
                    tally[ia][2] += 1
                    tally[ib][2] += 1
            credit(tally, 1)
            if done % yield_every == 0 or done == trials:
                if should_cancel is not None and should_cancel():
                    logger.debug("simulation of season %s cancelled at %d/%d", season.season, done, trials)
                    raise SimulationCancelled(f"cancelled after {done} trials")
                yield SimulationProgress(done, trials)

    acc = SimulationAccumulator(trials=trials)
    for i, uid in enumerate(team_ids):
        acc.placements[uid] = {place + 1: c for place, c in enumerate(place_counts[i])}
        acc.wins[uid] = {w: c for w, c in enumerate(win_counts[i])}
        acc.records[uid] = {Record(*key): c for key, c in sorted(record_counts[i].items())}
    return acc


def simulate(
    season: Season,
    trials: int = DEFAULT_TRIALS,
    points_model: str = "season",
    *,
    rng: random.Random | None = None,
    seed: int | None = None,
    yield_every: int = DEFAULT_YIELD_EVERY,
    should_cancel: Callable[[], bool] | None = None,
    on_progress: Callable[[SimulationProgress], None] | None = None,
) -> SimulationAccumulator:
    """Run :func:`iter_simulation` to completion."""
    gen = iter_simulation(
        season,
        trials,
        points_model,
        rng=rng,
        seed=seed,
        yield_every=yield_every,
        should_cancel=should_cancel,
    )
    while True:
        try:
            progress = next(gen)
        except StopIteration as stop:
            return stop.value
        if on_progress is not None:
            on_progress(progress)
