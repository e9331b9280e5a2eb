from ffstats.compute.models import Matchup, NflState, Record, Roster, Season, User

LEAGUE = {
    "league_id": "L2023",
    "season": "2023",
    "previous_league_id": "L2022",
    "settings": {"playoff_week_start": 15, "start_week": 1},
}
USERS = [
    {"user_id": "100", "display_name": "alice", "metadata": {"team_name": "Gridiron Geese"}},
    {"user_id": "200", "display_name": "bob", "metadata": {}},
    {"display_name": "nobody"},
]
ROSTERS = [
    {
        "roster_id": 1,
        "owner_id": "100",
        "settings": {
            "wins": 9,
            "losses": 4,
            "ties": 1,
            "fpts": 1650,
            "fpts_decimal": 42,
            "fpts_against": 1500,
            "fpts_against_decimal": 7,
        },
    },
    {"roster_id": 2, "owner_id": "200", "settings": None},
]
MATCHUPS = {
    "2": [{"roster_id": 1, "matchup_id": 1, "points": 99.5}, {"roster_id": 2, "matchup_id": 1, "points": 101}],
    "1": [{"roster_id": 1, "matchup_id": 1, "points": "120.25"}, {"roster_id": 2, "matchup_id": None}],
}
STATE = {"season": "2024", "week": 3, "season_type": "regular"}


def test_record_arithmetic_and_display():
    total = Record(1, 2, 3) + Record(1, 0, 0)
    assert total == Record(2, 2, 3)
    wins, losses, ties = total
    assert (wins, losses, ties) == (2, 2, 3)
    assert total.games == 7
    assert total.display() == "2-2-3"
    assert Record(2, 1, 0).win_percentage() == "66.67%"
    assert Record().win_percentage() == "0.00%"
    assert Record(1, 1, 2).win_pct == 0.5
    assert sum([Record(1, 0, 0), Record(0, 1, 0)], Record()) == Record(1, 1, 0)


def test_from_sleeper_builds_season():
    season = Season.from_sleeper(LEAGUE, USERS, ROSTERS, MATCHUPS, STATE)
    assert season.season == "2023" and season.year == 2023
    assert season.playoff_week_start == 15
    assert season.nfl_state == NflState("2024", 3, "regular")
    assert not season.is_current and not season.is_in_progress
    assert [u.user_id for u in season.users] == ["100", "200"]
    assert season.users[0] == User("100", "alice", "Gridiron Geese")
    assert season.users[1].team_name == "bob"
    assert [wm.week for wm in season.matchup_info] == [1, 2]


def test_roster_points_combine_decimal_parts():
    season = Season.from_sleeper(LEAGUE, USERS, ROSTERS, MATCHUPS, STATE)
    roster = season.roster_for_user("100")
    assert roster == Roster(1, "100", 9, 4, 1, 1650.42, 1500.07)
    assert roster.record == Record(9, 4, 1)
    empty = season.roster_for_user("200")
    assert empty.record == Record() and empty.points_for == 0.0


def test_week_lookups_tolerate_missing_opponents():
    season = Season.from_sleeper(LEAGUE, USERS, ROSTERS, MATCHUPS, STATE)
    week1 = season.week(1)
    mine = week1.find(1)
    assert mine == Matchup(1, 1, 120.25)
    assert week1.opponent_of(mine) is None
    assert week1.find(2).matchup_id is None
    assert week1.find(None) is None
    week2 = season.week(2)
    assert week2.opponent_of(week2.find(1)).points == 101.0
    assert season.week(9) is None
    assert season.user_for_roster(2).user_id == "200"
    assert season.user_for_roster(42) is None


def test_played_weeks_for_in_progress_season():
    league = dict(LEAGUE, season="2024")
    season = Season.from_sleeper(league, USERS, ROSTERS, MATCHUPS, STATE)
    assert season.is_current and season.is_in_progress
    assert [wm.week for wm in season.regular_weeks()] == [1, 2]
    assert [wm.week for wm in season.played_weeks()] == [1, 2]
    later = Season.from_sleeper(league, USERS, ROSTERS, MATCHUPS, dict(STATE, week=2))
    assert [wm.week for wm in later.played_weeks()] == [1]
    post = Season.from_sleeper(league, USERS, ROSTERS, MATCHUPS, dict(STATE, week=1, season_type="post"))
    assert post.is_current and not post.is_in_progress
    assert [wm.week for wm in post.played_weeks()] == [1, 2]


def test_missing_matchups_and_state():
    season = Season.from_sleeper({"season": 2022, "settings": {}}, [], [], None, None)
    assert season.matchup_info is None
    assert season.playoff_week_start == 15
    assert season.nfl_state == NflState("", 0, "regular")
    assert season.regular_weeks() == [] and season.played_weeks() == []
