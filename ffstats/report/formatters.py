"""Output format helpers for league reports.

JSON output coerces numeric-looking metadata strings to numbers and emits a
``sections`` index describing which optional sections are present.
"""

from __future__ import annotations
import json
from typing import Any
from .models import LeagueReport


def format_markdown(report: LeagueReport) -> str:
    return "\n".join(report.markdown_lines) + "\n"


def _coerce_number(val: Any) -> Any:
    if not isinstance(val, str):
        return val
    s = val.strip()
    if s.isdigit():
        return int(s)
    try:
        return float(s)
    except ValueError:
        return val


def format_json(report: LeagueReport, schema_version: str, pretty: bool = True) -> str:
    payload = report.to_json_payload(schema_version)
    meta = payload.get("metadata", {})
    payload["metadata"] = {
        k: (v if k in {"season", "current_season", "seasons_loaded"} else _coerce_number(v))
        for k, v in meta.items()
    }
    payload["sections"] = {
        "records": bool(report.records),
        "current_streaks": bool(report.current_streaks),
        "longest_win_streaks": bool(report.longest_win_streaks),
        "longest_loss_streaks": bool(report.longest_loss_streaks),
        "simulation": report.simulation is not None,
    }
    if pretty:
        return json.dumps(payload, indent=2, sort_keys=True)
    return json.dumps(payload, separators=(",", ":"), sort_keys=True)
