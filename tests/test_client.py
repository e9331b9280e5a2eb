import pytest
import requests

from ffstats.api.client import RateLimiter, SleeperClient
from ffstats.api.loader import load_league_history, load_season
from ffstats.constants import DEFAULT_MIN_INTERVAL_SEC


class _Resp:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


class FakeClient:
    """Serves canned JSON by path, like SleeperClient.get_json."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get_json(self, path):
        self.calls.append(path)
        return self.routes.get(path)


def _league_routes(league_id, season, previous):
    return {
        f"/league/{league_id}": {
            "league_id": league_id,
            "season": season,
            "previous_league_id": previous,
            "settings": {"playoff_week_start": 3},
        },
        f"/league/{league_id}/users": [
            {"user_id": "a", "display_name": "A"},
            {"user_id": "b", "display_name": "B"},
        ],
        f"/league/{league_id}/rosters": [
            {"roster_id": 1, "owner_id": "a", "settings": {"wins": 1}},
            {"roster_id": 2, "owner_id": "b", "settings": {"losses": 1}},
        ],
        f"/league/{league_id}/matchups/1": [
            {"roster_id": 1, "matchup_id": 1, "points": 100},
            {"roster_id": 2, "matchup_id": 1, "points": 90},
        ],
    }


def test_rate_limiter_defaults():
    assert RateLimiter().min_interval == DEFAULT_MIN_INTERVAL_SEC
    assert RateLimiter(0.5).min_interval == 0.5


def test_client_interval_takes_larger_limit():
    client = SleeperClient("https://example.test/v1/", rpm_limit=60, min_interval_ms=250)
    assert client.base_url == "https://example.test/v1"
    assert client.rate.min_interval == 1.0
    client = SleeperClient("https://example.test/v1", rpm_limit=600, min_interval_ms=250)
    assert client.rate.min_interval == 0.25


def test_from_env_ignores_bad_values(monkeypatch):
    monkeypatch.setenv("SLEEPER_RPM_LIMIT", "lots")
    monkeypatch.setenv("SLEEPER_MIN_INTERVAL_MS", "500")
    client = SleeperClient.from_env()
    assert client.rate.min_interval == 0.5


def test_get_json_and_http_errors(monkeypatch):
    client = SleeperClient("https://example.test/v1", min_interval_ms=1)
    seen = []

    def fake_get(url, timeout):
        seen.append((url, timeout))
        if url.endswith("/missing"):
            return _Resp(None, status=404)
        return _Resp({"season": "2024", "week": 5})

    monkeypatch.setattr(client.session, "get", fake_get)
    assert client.get_json("state/nfl") == {"season": "2024", "week": 5}
    assert seen[0] == ("https://example.test/v1/state/nfl", 20)
    with pytest.raises(requests.HTTPError):
        client.get_json("/missing")


def test_load_season():
    routes = _league_routes("L1", "2024", None)
    routes["/state/nfl"] = {"season": "2024", "week": 2, "season_type": "regular"}
    season = load_season(FakeClient(routes), "L1")
    assert season.season == "2024" and season.is_in_progress
    assert [wm.week for wm in season.matchup_info] == [1]
    assert season.roster_for_user("a").wins == 1


def test_load_league_history_walks_previous_leagues():
    routes = {"/state/nfl": {"season": "2024", "week": 1, "season_type": "regular"}}
    routes.update(_league_routes("L3", "2024", "L2"))
    routes.update(_league_routes("L2", "2023", "L1"))
    routes.update(_league_routes("L1", "2022", "0"))
    client = FakeClient(routes)
    seasons = load_league_history(client, "L3")
    assert [s.season for s in seasons] == ["2022", "2023", "2024"]
    assert all(s.nfl_state.season == "2024" for s in seasons)
    assert client.calls.count("/state/nfl") == 1


def test_load_league_history_respects_limit():
    routes = {"/state/nfl": {"season": "2024", "week": 1}}
    routes.update(_league_routes("L3", "2024", "L2"))
    routes.update(_league_routes("L2", "2023", "L3"))
    seasons = load_league_history(FakeClient(routes), "L3", max_seasons=5)
    # L2 points back at L3; the walk stops instead of looping
    assert [s.season for s in seasons] == ["2023", "2024"]
    assert len(load_league_history(FakeClient(routes), "L3", max_seasons=1)) == 1
