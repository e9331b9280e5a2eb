"""Fetch Sleeper payloads and assemble :class:`Season` values.

This is the only place in the package that performs I/O; everything under
``ffstats.compute`` works on the Seasons built here.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from ffstats.compute.models import Season
from ffstats.constants import MAX_FETCH_WEEK, MAX_HISTORY_SEASONS

from .client import SleeperClient

logger = logging.getLogger(__name__)

LEAGUE_ID = os.environ.get("SLEEPER_LEAGUE_ID", "")
SPORT = os.environ.get("SLEEPER_SPORT", "nfl")


def fetch_state(client: SleeperClient, sport: str = SPORT) -> dict:
    return client.get_json(f"/state/{sport}") or {}


def _fetch_matchups(client: SleeperClient, league_id: str, last_week: int) -> dict[int, list[dict]]:
    weeks: dict[int, list[dict]] = {}
    for wk in range(1, last_week + 1):
        rows = client.get_json(f"/league/{league_id}/matchups/{wk}")
        if rows:
            weeks[wk] = rows
    return weeks


def _season_from_league(client: SleeperClient, league: dict[str, Any], state: dict) -> Season:
    league_id = str(league.get("league_id"))
    users = client.get_json(f"/league/{league_id}/users") or []
    rosters = client.get_json(f"/league/{league_id}/rosters") or []
    matchups = _fetch_matchups(client, league_id, MAX_FETCH_WEEK)
    logger.debug(
        "fetched season %s (league %s): %d users, %d rosters, %d weeks",
        league.get("season"), league_id, len(users), len(rosters), len(matchups),
    )
    return Season.from_sleeper(league, users, rosters, matchups, state)


def load_season(
    client: SleeperClient,
    league_id: str = LEAGUE_ID,
    state: dict | None = None,
    sport: str = SPORT,
) -> Season:
    if state is None:
        state = fetch_state(client, sport)
    league = client.get_json(f"/league/{league_id}")
    return _season_from_league(client, league, state)


def load_league_history(
    client: SleeperClient,
    league_id: str = LEAGUE_ID,
    max_seasons: int = MAX_HISTORY_SEASONS,
    sport: str = SPORT,
) -> list[Season]:
    """Seasons reachable from ``league_id`` through ``previous_league_id``, oldest first."""
    state = fetch_state(client, sport)
    seasons: list[Season] = []
    seen: set[str] = set()
    next_id: str | None = league_id
    while next_id and next_id not in seen and len(seasons) < max_seasons:
        seen.add(next_id)
        league = client.get_json(f"/league/{next_id}")
        if not league:
            break
        seasons.append(_season_from_league(client, league, state))
        prev = league.get("previous_league_id")
        next_id = str(prev) if prev and str(prev) != "0" else None
    seasons.sort(key=lambda s: s.year)
    return seasons
