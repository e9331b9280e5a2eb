from __future__ import annotations

from typing import Iterable, Literal, TYPE_CHECKING

if TYPE_CHECKING:
    from .models import Matchup

Outcome = Literal["W", "L", "T"]


def _coerce_int(value: object, default: int = 0) -> int:
    """Best‑effort int conversion (supports int, float, str of digits)."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return default
    return default


def _coerce_float(value: object, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return default
    return default


def compare_points(mine: float, theirs: float) -> Outcome:
    """Strictly more points wins, strictly fewer loses, equal is a tie."""
    if mine > theirs:
        return "W"
    if mine < theirs:
        return "L"
    return "T"


def group_rows(rows: Iterable[Matchup]) -> dict[int, list[Matchup]]:
    groups: dict[int, list[Matchup]] = {}
    for row in rows or []:
        if row.matchup_id is None:
            # Create deterministic synthetic id using roster_id when missing
            mid = -100000 - row.roster_id
        else:
            mid = row.matchup_id
        groups.setdefault(mid, []).append(row)
    return groups


def paired_rows(rows: Iterable[Matchup]) -> list[tuple[Matchup, Matchup]]:
    """Head-to-head pairs in matchup_id order; byes and malformed groups are dropped."""
    pairs: list[tuple[Matchup, Matchup]] = []
    for mid, entries in sorted(group_rows(rows).items()):
        if mid < 0 or len(entries) != 2:
            continue
        pairs.append((entries[0], entries[1]))
    return pairs
