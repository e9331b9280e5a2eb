"""Historical playoff odds keyed by in-season record.

Every user's record after every regular-season week is a snapshot; the
snapshot counts as "made" when that user eventually finished inside the
playoff spots.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ffstats.constants import DEFAULT_PLAYOFF_SPOTS

from .models import Season
from .records import record_as_of_week, season_place

BUCKET_CAP = 10
BUCKETS: tuple[str, ...] = tuple(str(i) for i in range(BUCKET_CAP)) + (f"{BUCKET_CAP}+",)


def bucket(value: int) -> str:
    return f"{BUCKET_CAP}+" if value >= BUCKET_CAP else str(value)


@dataclass(slots=True)
class CellCounts:
    made: int = 0
    missed: int = 0

    @property
    def total(self) -> int:
        return self.made + self.missed

    def pct(self) -> float:
        return self.made * 100 / self.total if self.total else 0.0


@dataclass(slots=True)
class OddsGrid:
    # grid[loss_bucket][win_bucket]
    grid: dict[str, dict[str, CellCounts]]
    snapshots: int = 0

    def cell(self, wins: int, losses: int) -> CellCounts:
        return self.grid[bucket(losses)][bucket(wins)]


def _years_played(seasons: list[Season]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for s in seasons:
        for u in s.users:
            counts[u.user_id] = counts.get(u.user_id, 0) + 1
    return counts


def playoff_odds_by_record(
    seasons: Iterable[Season],
    playoff_spots: int = DEFAULT_PLAYOFF_SPOTS,
    min_years: int = 0,
) -> OddsGrid:
    seasons = list(seasons)
    out = OddsGrid(grid={lb: {wb: CellCounts() for wb in BUCKETS} for lb in BUCKETS})
    years = _years_played(seasons)

    for season in seasons:
        reg_weeks = season.last_regular_week if season.last_regular_week > 0 else 14
        for user in season.users:
            if years.get(user.user_id, 0) < min_years:
                continue
            place = season_place(user.user_id, season)
            made = 0 < place <= playoff_spots
            for week in range(1, reg_weeks + 1):
                # record_as_of_week stops before its week, so ask for the next one
                rec = record_as_of_week(user.user_id, week + 1, season)
                cell = out.cell(rec.wins, rec.losses)
                if made:
                    cell.made += 1
                else:
                    cell.missed += 1
                out.snapshots += 1
    return out
