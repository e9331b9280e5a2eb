"""Immutable season value types consumed by the analytics engine.

A :class:`Season` is built once from the Sleeper payloads (league, users,
rosters, weekly matchups and the ``/state/nfl`` snapshot) and is never mutated
afterwards. The ``nfl_state`` it carries is the "as-of" point for every
calculation: nothing here consults the system clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Mapping

from .core import _coerce_float, _coerce_int


def _split_points(settings: Mapping[str, Any], whole: str, decimal: str) -> float:
    # Sleeper reports totals as an integer part plus hundredths
    raw = _coerce_float(settings.get(whole)) + _coerce_float(settings.get(decimal)) / 100
    return round(raw, 2)


@dataclass(frozen=True, slots=True)
class Record:
    wins: int = 0
    losses: int = 0
    ties: int = 0

    def __add__(self, other: Record) -> Record:
        if not isinstance(other, Record):
            return NotImplemented
        return Record(
            self.wins + other.wins, self.losses + other.losses, self.ties + other.ties
        )

    def __iter__(self) -> Iterator[int]:
        return iter((self.wins, self.losses, self.ties))

    @property
    def games(self) -> int:
        return self.wins + self.losses + self.ties

    @property
    def win_pct(self) -> float:
        g = self.games
        return (self.wins + 0.5 * self.ties) / g if g else 0.0

    def display(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"

    def win_percentage(self) -> str:
        """Share of games won as ``"66.67%"`` (ties count as not won)."""
        g = self.games
        if not g:
            return "0.00%"
        return f"{self.wins * 100 / g:.2f}%"


@dataclass(frozen=True, slots=True)
class NflState:
    season: str
    week: int
    season_type: str = "regular"

    @classmethod
    def from_json(cls, payload: Mapping[str, Any] | None) -> NflState:
        payload = payload or {}
        return cls(
            season=str(payload.get("season") or ""),
            week=_coerce_int(payload.get("week"), 0),
            season_type=str(payload.get("season_type") or "regular"),
        )


@dataclass(frozen=True, slots=True)
class User:
    user_id: str
    display_name: str = ""
    team_name: str = ""

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> User:
        uid = str(payload.get("user_id") or "")
        meta = payload.get("metadata") or {}
        team_name = ""
        if isinstance(meta, dict):
            team_name = meta.get("team_name") or ""
        display = payload.get("display_name") or payload.get("username") or uid
        return cls(user_id=uid, display_name=display, team_name=team_name or display)


@dataclass(frozen=True, slots=True)
class Roster:
    roster_id: int
    owner_id: str | None
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0

    @property
    def record(self) -> Record:
        return Record(self.wins, self.losses, self.ties)

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> Roster:
        settings = payload.get("settings") or {}
        if not isinstance(settings, dict):
            settings = {}
        owner = payload.get("owner_id")
        return cls(
            roster_id=_coerce_int(payload.get("roster_id"), -1),
            owner_id=str(owner) if owner else None,
            wins=_coerce_int(settings.get("wins")),
            losses=_coerce_int(settings.get("losses")),
            ties=_coerce_int(settings.get("ties")),
            points_for=_split_points(settings, "fpts", "fpts_decimal"),
            points_against=_split_points(settings, "fpts_against", "fpts_against_decimal"),
        )


@dataclass(frozen=True, slots=True)
class Matchup:
    roster_id: int
    matchup_id: int | None
    points: float = 0.0

    @classmethod
    def from_json(cls, payload: Mapping[str, Any]) -> Matchup:
        mid = payload.get("matchup_id")
        return cls(
            roster_id=_coerce_int(payload.get("roster_id"), -1),
            matchup_id=None if mid is None else _coerce_int(mid, -1),
            points=_coerce_float(payload.get("points")),
        )


@dataclass(frozen=True, slots=True)
class WeekMatchups:
    week: int
    matchups: tuple[Matchup, ...] = ()

    def find(self, roster_id: int | None) -> Matchup | None:
        if roster_id is None:
            return None
        for m in self.matchups:
            if m.roster_id == roster_id:
                return m
        return None

    def opponent_of(self, entry: Matchup) -> Matchup | None:
        if entry.matchup_id is None:
            return None
        for m in self.matchups:
            if m.matchup_id == entry.matchup_id and m.roster_id != entry.roster_id:
                return m
        return None


@dataclass(frozen=True, slots=True)
class Season:
    season: str
    playoff_week_start: int
    nfl_state: NflState
    rosters: tuple[Roster, ...] = ()
    users: tuple[User, ...] = ()
    matchup_info: tuple[WeekMatchups, ...] | None = None

    @property
    def year(self) -> int:
        return _coerce_int(self.season, 0)

    @property
    def is_current(self) -> bool:
        return self.nfl_state.season == self.season

    @property
    def is_in_progress(self) -> bool:
        return self.is_current and self.nfl_state.season_type != "post"

    @property
    def last_regular_week(self) -> int:
        return self.playoff_week_start - 1

    def roster_for_user(self, user_id: str) -> Roster | None:
        for r in self.rosters:
            if r.owner_id == user_id:
                return r
        return None

    def user_for_roster(self, roster_id: int) -> User | None:
        owner = next((r.owner_id for r in self.rosters if r.roster_id == roster_id), None)
        if owner is None:
            return None
        return next((u for u in self.users if u.user_id == owner), None)

    def week(self, week: int) -> WeekMatchups | None:
        for wm in self.matchup_info or ():
            if wm.week == week:
                return wm
        return None

    def regular_weeks(self) -> list[WeekMatchups]:
        weeks = [wm for wm in self.matchup_info or () if wm.week < self.playoff_week_start]
        return sorted(weeks, key=lambda wm: wm.week)

    def played_weeks(self) -> list[WeekMatchups]:
        """Regular-season weeks that count: all of them, or only those already played."""
        weeks = self.regular_weeks()
        if self.is_in_progress:
            weeks = [wm for wm in weeks if wm.week < self.nfl_state.week]
        return weeks

    @classmethod
    def from_sleeper(
        cls,
        league: Mapping[str, Any],
        users: list[dict],
        rosters: list[dict],
        matchups_by_week: Mapping[int, list[dict]] | None,
        state: Mapping[str, Any] | None,
    ) -> Season:
        settings = league.get("settings", {}) or {}
        matchup_info = None
        if matchups_by_week is not None:
            matchup_info = tuple(
                WeekMatchups(
                    week=_coerce_int(wk),
                    matchups=tuple(Matchup.from_json(row) for row in rows or []),
                )
                for wk, rows in sorted(matchups_by_week.items(), key=lambda kv: _coerce_int(kv[0]))
            )
        return cls(
            season=str(league.get("season") or ""),
            playoff_week_start=_coerce_int(settings.get("playoff_week_start"), 15) or 15,
            nfl_state=NflState.from_json(state),
            rosters=tuple(Roster.from_json(r) for r in rosters or []),
            users=tuple(User.from_json(u) for u in users or [] if u.get("user_id")),
            matchup_info=matchup_info,
        )
