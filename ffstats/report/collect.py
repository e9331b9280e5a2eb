"""Assemble a league report from fetched seasons."""

from __future__ import annotations

import datetime
from typing import Any, Callable, Sequence

from ffstats.compute import records as rec
from ffstats.compute import streaks as stk
from ffstats.compute.models import Season
from ffstats.compute.simulation import SimulationAccumulator, SimulationProgress, simulate
from ffstats.constants import (
    DEFAULT_PLAYOFF_SPOTS,
    DEFAULT_TRIALS,
    PCT_PLACES,
    SCHEMA_VERSION,
    WIN_PCT_PLACES,
)

from .models import LeagueReport


def _md_cell(value: Any) -> str:
    # Team names are user-supplied; keep each one inside its table cell
    return " ".join(str(value).split()).replace("|", "\\|")


def md_section(title: str, headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> list[str]:
    """A level-two heading and a left-aligned table, or a placeholder when empty."""
    lines = [f"## {title}"]
    if not rows:
        return lines + ["", "_No data._", ""]
    lines.append("| " + " | ".join(_md_cell(h) for h in headers) + " |")
    lines.append("|" + " :--- |" * len(headers))
    lines.extend("| " + " | ".join(_md_cell(c) for c in row) + " |" for row in rows)
    lines.append("")
    return lines


def _team_names(seasons: list[Season]) -> dict[str, str]:
    # Latest season wins so renamed teams show their current name
    names: dict[str, str] = {}
    for s in sorted(seasons, key=lambda s: s.year):
        for u in s.users:
            names[u.user_id] = u.team_name or u.display_name or u.user_id
    return names


def _season_phase(season: Season) -> str:
    if not season.is_current:
        return "complete"
    if season.nfl_state.season_type == "post":
        return "postseason"
    return "in_progress"


def _record_rows(season: Season, names: dict[str, str]) -> list[dict]:
    rows = []
    for u in season.users:
        actual = rec.schedule_record(u.user_id, u.user_id, season)
        vs_league = rec.record_against_league(u.user_id, season)
        rows.append(
            {
                "user_id": u.user_id,
                "team": names.get(u.user_id, u.user_id),
                "place": rec.season_place(u.user_id, season),
                "record": actual.display(),
                "win_pct": round(actual.win_pct, WIN_PCT_PLACES),
                "record_vs_league": vs_league.display(),
                "record_vs_league_pct": vs_league.win_percentage(),
                "avg_record_vs_league": rec.average_record_against_league(u.user_id, season).display(),
                "league_record_at_schedule": rec.league_record_at_schedule(u.user_id, season).display(),
                "record_top_half": rec.record_in_top_half(u.user_id, season).display(),
                "record_vs_winning": rec.record_against_winning_teams(u.user_id, season).display(),
            }
        )
    rows.sort(key=lambda r: (r["place"] or 10**6, r["user_id"]))
    return rows


def _streak_row(uid: str, names: dict[str, str], streak: stk.Streak) -> dict:
    return {
        "user_id": uid,
        "team": names.get(uid, uid),
        "type": streak.type,
        "length": streak.length,
        "start": streak.start.label,
        "end": streak.end.label,
    }


def _current_streak_rows(seasons: list[Season], names: dict[str, str]) -> list[dict]:
    rows = [_streak_row(uid, names, s) for uid, s in stk.all_current_streaks(seasons).items()]
    rows.sort(key=lambda r: (r["type"] != "win", -r["length"], r["team"]))
    return rows


def _longest_streak_rows(streak_type: str, seasons: list[Season], names: dict[str, str]) -> list[dict]:
    rows = [
        _streak_row(uid, names, s)
        for uid, streaks in stk.all_longest_streaks(streak_type, seasons).items()
        for s in streaks
    ]
    rows.sort(key=lambda r: (-r["length"], r["team"], r["start"]))
    return rows


def _simulation_rows(
    season: Season, acc: SimulationAccumulator, names: dict[str, str], playoff_spots: int
) -> tuple[list[dict], list[dict]]:
    placements = []
    distribution = []
    for u in season.users:
        if u.user_id not in acc.placements:
            continue
        places = acc.placements[u.user_id]
        placements.append(
            {
                "user_id": u.user_id,
                "team": names.get(u.user_id, u.user_id),
                "current_record": rec.schedule_record(u.user_id, u.user_id, season).display(),
                "playoff_count": acc.playoff_count(u.user_id, playoff_spots),
                "playoff_pct": round(acc.playoff_pct(u.user_id, playoff_spots), PCT_PLACES),
                "places": {str(p): c for p, c in sorted(places.items())},
            }
        )
        distribution.append(
            {
                "user_id": u.user_id,
                "team": names.get(u.user_id, u.user_id),
                "wins": {str(w): c for w, c in sorted(acc.wins[u.user_id].items())},
            }
        )
    placements.sort(key=lambda r: (-r["playoff_count"], r["team"]))
    return placements, distribution


def build_league_report(
    seasons: list[Season],
    *,
    season: str | None = None,
    trials: int = DEFAULT_TRIALS,
    points_model: str = "season",
    seed: int | None = None,
    playoff_spots: int = DEFAULT_PLAYOFF_SPOTS,
    on_progress: Callable[[SimulationProgress], None] | None = None,
    should_cancel: Callable[[], bool] | None = None,
) -> LeagueReport:
    if not seasons:
        raise ValueError("No seasons to report on")
    ordered = sorted(seasons, key=lambda s: s.year)
    target = ordered[-1] if season is None else next((s for s in ordered if s.season == str(season)), None)
    if target is None:
        raise ValueError(f"Season {season} not found in league history")
    names = _team_names(ordered)

    records = _record_rows(target, names)
    current = _current_streak_rows(ordered, names)
    longest_win = _longest_streak_rows("win", ordered, names)
    longest_loss = _longest_streak_rows("loss", ordered, names)

    sim_rows = dist_rows = None
    if target.is_in_progress:
        acc = simulate(
            target,
            trials,
            points_model,
            seed=seed,
            on_progress=on_progress,
            should_cancel=should_cancel,
        )
        sim_rows, dist_rows = _simulation_rows(target, acc, names, playoff_spots)

    phase = _season_phase(target)
    meta_rows = [
        ["schema_version", SCHEMA_VERSION],
        ["generated_at", datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds")],
        ["season", target.season],
        ["current_season", target.nfl_state.season],
        ["state_week", str(target.nfl_state.week)],
        ["season_phase", phase],
        ["playoff_week_start", str(target.playoff_week_start)],
        ["num_teams", str(len(target.users))],
        ["seasons_loaded", ",".join(s.season for s in ordered)],
        ["simulation_trials", str(trials if sim_rows is not None else 0)],
        ["points_model", points_model if sim_rows is not None else "-"],
    ]

    lines = [f"# League Report {target.season}", ""]
    lines += md_section("Metadata", ["key", "value"], meta_rows)
    lines += md_section(
        "Season Records",
        ["place", "team", "record", "vs_league", "vs_league_pct", "avg_vs_league",
         "league_at_schedule", "top_half", "vs_winning"],
        [
            [r["place"], r["team"], r["record"], r["record_vs_league"], r["record_vs_league_pct"],
             r["avg_record_vs_league"], r["league_record_at_schedule"], r["record_top_half"],
             r["record_vs_winning"]]
            for r in records
        ],
    )
    streak_headers = ["team", "type", "length", "start", "end"]
    for title, rows in (
        ("Current Streaks", current),
        ("Longest Win Streaks", longest_win),
        ("Longest Loss Streaks", longest_loss),
    ):
        lines += md_section(
            title, streak_headers,
            [[r["team"], r["type"], r["length"], r["start"], r["end"]] for r in rows],
        )
    if sim_rows is not None:
        n = len(sim_rows)
        lines += md_section(
            f"Playoff Odds ({trials} simulations, {points_model} points)",
            ["team", "record", "playoffs", *[str(p) for p in range(1, n + 1)]],
            [
                [r["team"], r["current_record"], f"{r['playoff_count']} ({r['playoff_pct']:.{PCT_PLACES}f}%)",
                 *[r["places"].get(str(p), 0) for p in range(1, n + 1)]]
                for r in sim_rows
            ],
        )
        max_w = max((int(w) for r in dist_rows or [] for w in r["wins"]), default=0)
        lines += md_section(
            "Win Distribution",
            ["team", *[str(w) for w in range(max_w + 1)]],
            [[r["team"], *[r["wins"].get(str(w), 0) for w in range(max_w + 1)]] for r in dist_rows or []],
        )

    return LeagueReport(
        season=target.season,
        current_season=target.nfl_state.season,
        season_phase=phase,
        num_teams=len(target.users),
        seasons_loaded=[s.season for s in ordered],
        records=records,
        current_streaks=current,
        longest_win_streaks=longest_win,
        longest_loss_streaks=longest_loss,
        meta_rows=meta_rows,
        markdown_lines=lines,
        simulation=sim_rows,
        win_distribution=dist_rows,
        simulation_trials=trials if sim_rows is not None else 0,
        points_model=points_model if sim_rows is not None else None,
    )
