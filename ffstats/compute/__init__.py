from . import core, models, odds, records, simulation, streaks

Record = models.Record
Season = models.Season

group_rows = core.group_rows
compare_points = core.compare_points

schedule_record = records.schedule_record
record_as_of_week = records.record_as_of_week
record_against_league = records.record_against_league
league_record_at_schedule = records.league_record_at_schedule
average_record_against_league = records.average_record_against_league
average_league_record_at_schedule = records.average_league_record_at_schedule
record_in_top_half = records.record_in_top_half
records_in_top_half = records.records_in_top_half
record_against_winning_teams = records.record_against_winning_teams
season_place = records.season_place
standings_snapshot = records.standings_snapshot

build_weekly_outcomes = streaks.build_weekly_outcomes
longest_streaks = streaks.longest_streaks
current_streak = streaks.current_streak
streak_week_details = streaks.streak_week_details

simulate = simulation.simulate
iter_simulation = simulation.iter_simulation
SimulationCancelled = simulation.SimulationCancelled

playoff_odds_by_record = odds.playoff_odds_by_record

__all__ = [
    "Record",
    "Season",
    "group_rows",
    "compare_points",
    "schedule_record",
    "record_as_of_week",
    "record_against_league",
    "league_record_at_schedule",
    "average_record_against_league",
    "average_league_record_at_schedule",
    "record_in_top_half",
    "records_in_top_half",
    "record_against_winning_teams",
    "season_place",
    "standings_snapshot",
    "build_weekly_outcomes",
    "longest_streaks",
    "current_streak",
    "streak_week_details",
    "simulate",
    "iter_simulation",
    "SimulationCancelled",
    "playoff_odds_by_record",
]
