from ffstats.compute.odds import BUCKETS, bucket, playoff_odds_by_record


def test_bucket_caps_at_ten():
    assert bucket(0) == "0"
    assert bucket(9) == "9"
    assert bucket(10) == "10+"
    assert bucket(13) == "10+"
    assert BUCKETS[-1] == "10+" and len(BUCKETS) == 11


def test_odds_grid_counts_record_after_each_week(complete_season):
    grid = playoff_odds_by_record([complete_season], playoff_spots=2)
    # 4 users x 4 regular weeks
    assert grid.snapshots == 16
    # Nobody is still 0-0 once a week has been played
    assert grid.cell(0, 0).total == 0
    # Final records land in the grid: team 1 unbeaten, team 4 winless
    assert (grid.cell(4, 0).made, grid.cell(4, 0).missed) == (1, 0)
    assert (grid.cell(0, 4).made, grid.cell(0, 4).missed) == (0, 1)
    # Team 1 opened 1-0 and made it, team 3 opened 1-0 and did not
    start = grid.cell(1, 0)
    assert (start.made, start.missed) == (1, 1)
    assert start.pct() == 50.0
    # Teams 2 and 3 met at 1-1 and again at 2-2; team 2 took second on points
    assert (grid.cell(1, 1).made, grid.cell(1, 1).missed) == (1, 1)
    assert (grid.cell(2, 2).made, grid.cell(2, 2).missed) == (1, 1)
    assert grid.cell(1, 2).missed == 1


def test_min_years_filters_users(complete_season):
    grid = playoff_odds_by_record([complete_season], min_years=2)
    assert grid.snapshots == 0
    assert grid.cell(0, 0).total == 0
