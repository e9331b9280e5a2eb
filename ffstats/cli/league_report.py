from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import requests

from ffstats.api.client import SleeperClient
from ffstats.api.loader import LEAGUE_ID, SPORT, load_league_history
from ffstats.compute.models import Season
from ffstats.compute.simulation import SimulationProgress
from ffstats.constants import DEFAULT_PLAYOFF_SPOTS, DEFAULT_TRIALS, SCHEMA_VERSION
from ffstats.report.collect import build_league_report
from ffstats.report.formatters import format_json, format_markdown


def _pretty(data: Any) -> str:
    return json.dumps(data, indent=2, sort_keys=True)


def _progress_printer(verbose: bool):
    if not verbose:
        return None
    last = {"pct": -10}

    def report(progress: SimulationProgress) -> None:
        pct = int(progress.fraction * 100)
        if pct >= last["pct"] + 10 or progress.completed == progress.total:
            last["pct"] = pct
            print(f"[league_report] simulated {progress.completed}/{progress.total} ({pct}%)")

    return report


def generate_league_report(
    seasons: list[Season],
    *,
    season: str | None = None,
    out_dir: str = "reports/league",
    output_formats: Sequence[str] | None = None,
    trials: int = DEFAULT_TRIALS,
    points_model: str = "season",
    seed: int | None = None,
    playoff_spots: int = DEFAULT_PLAYOFF_SPOTS,
    json_pretty: bool = True,
    verbose: bool = False,
    dry_run: bool = False,
) -> dict:
    formats = list(output_formats) if output_formats else ["markdown"]
    report = build_league_report(
        seasons,
        season=season,
        trials=trials,
        points_model=points_model,
        seed=seed,
        playoff_spots=playoff_spots,
        on_progress=_progress_printer(verbose),
    )
    dest_dir = Path(out_dir)
    if not dry_run:
        dest_dir.mkdir(parents=True, exist_ok=True)

    results: dict[str, dict[str, Any]] = {}
    for fmt in formats:
        fmt_norm = fmt.lower()
        if fmt_norm in {"md", "markdown"}:
            content = format_markdown(report)
            path = dest_dir / f"{report.season}.md"
        elif fmt_norm == "json":
            content = format_json(report, SCHEMA_VERSION, pretty=json_pretty)
            path = dest_dir / f"{report.season}.json"
        else:
            raise ValueError(f"Unsupported format: {fmt}")
        if not dry_run:
            path.write_text(content, encoding="utf-8")
        if verbose:
            print(f"[league_report] wrote {fmt_norm} -> {path} ({len(content)} bytes)")
        key = "markdown" if fmt_norm in {"md", "markdown"} else fmt_norm
        results[key] = {"path": str(path), "bytes": len(content), "written": not dry_run}

    return {
        "formats": results,
        "meta": {
            "schema_version": SCHEMA_VERSION,
            "season": report.season,
            "season_phase": report.season_phase,
            "seasons_loaded": report.seasons_loaded,
        },
        "entries": {
            "records": len(report.records),
            "current_streaks": len(report.current_streaks),
            "simulation": len(report.simulation or []),
        },
    }


def main(argv: list[str] | None = None) -> int:  # pragma: no cover
    parser = argparse.ArgumentParser(
        description="Generate Sleeper league records, streaks and playoff odds report"
    )
    parser.add_argument(
        "--league-id", default=LEAGUE_ID, help="Most recent Sleeper league_id (default from env)"
    )
    parser.add_argument(
        "--season", type=str, default=None, help="Season to report on (default: latest loaded)"
    )
    parser.add_argument("--sport", default=SPORT, help="Sport key (default nfl)")
    parser.add_argument("--out-dir", default="reports/league", help="Output directory")
    parser.add_argument("--trials", type=int, default=DEFAULT_TRIALS, help="Simulation trials")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for the simulation")
    parser.add_argument(
        "--points-model",
        choices=("season", "last3"),
        default="season",
        help="Scoring average that drives simulated win probabilities",
    )
    parser.add_argument(
        "--playoff-spots", type=int, default=DEFAULT_PLAYOFF_SPOTS, help="Teams that make the playoffs"
    )
    parser.add_argument(
        "--formats",
        default="markdown",
        help="Comma-separated list of output formats (markdown,json)",
    )
    parser.set_defaults(json_pretty=True)
    parser.add_argument(
        "--json-compact",
        dest="json_pretty",
        action="store_false",
        help="Use compact JSON (no whitespace)",
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose logging to stdout")
    parser.add_argument(
        "--dry-run", action="store_true", help="Build report but do not write files"
    )
    args = parser.parse_args(argv)
    formats = [f.strip() for f in args.formats.split(",") if f.strip()]
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.league_id:
        print("Error: --league-id or SLEEPER_LEAGUE_ID is required", file=sys.stderr)
        return 1
    try:
        with SleeperClient.from_env() as client:
            seasons = load_league_history(client, args.league_id, sport=args.sport)
        summary = generate_league_report(
            seasons,
            season=args.season,
            out_dir=args.out_dir,
            output_formats=formats,
            trials=args.trials,
            points_model=args.points_model,
            seed=args.seed,
            playoff_spots=args.playoff_spots,
            json_pretty=args.json_pretty,
            verbose=args.verbose,
            dry_run=args.dry_run,
        )
        print(_pretty(summary))
        for fmt_name, info in summary["formats"].items():
            print(f"Wrote [{fmt_name}]: {info['path']}")
        return 0
    except requests.HTTPError as e:  # pragma: no cover
        print(f"HTTPError: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:  # pragma: no cover
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
