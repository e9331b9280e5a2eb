from __future__ import annotations
from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class LeagueReport:
    season: str
    current_season: str
    season_phase: str
    num_teams: int
    seasons_loaded: list[str]
    records: list[dict]
    current_streaks: list[dict]
    longest_win_streaks: list[dict]
    longest_loss_streaks: list[dict]
    meta_rows: list[list[str]]
    markdown_lines: list[str]
    # Only present while the season is still being played
    simulation: list[dict] | None = None
    win_distribution: list[dict] | None = None
    simulation_trials: int = 0
    points_model: str | None = None

    def to_json_payload(self, schema_version: str) -> dict[str, Any]:
        base = {
            "schema_version": schema_version,
            "metadata": {k: v for k, v in self.meta_rows},
            "records": self.records,
            "current_streaks": self.current_streaks,
            "longest_win_streaks": self.longest_win_streaks,
            "longest_loss_streaks": self.longest_loss_streaks,
        }
        if self.simulation is not None:
            base["simulation"] = {
                "trials": self.simulation_trials,
                "points_model": self.points_model,
                "placements": self.simulation,
                "win_distribution": self.win_distribution or [],
            }
        return base
