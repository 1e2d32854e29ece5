"""Dashboard statistics over in-memory records."""
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytz

from tracker.analytics import (
    active_days,
    compute_analytics,
    current_streak,
    longest_streak,
    utc_day,
)

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=pytz.UTC)


def make_record(days_ago=0, difficulty="Easy", company="Google", **fields):
    defaults = {
        "title": f"Problem {days_ago}",
        "difficulty": difficulty,
        "company": company,
        "solved_at": NOW - timedelta(days=days_ago),
        "is_bookmarked": False,
        "time_spent": 0,
    }
    defaults.update(fields)
    return SimpleNamespace(**defaults)


class TestEmptyHistory:
    def test_everything_is_zero(self):
        stats = compute_analytics([], now=NOW)

        assert stats["total_solved"] == 0
        assert stats["difficulty_stats"] == {"Easy": 0, "Medium": 0, "Hard": 0}
        assert stats["top_companies"] == []
        assert stats["current_streak"] == 0
        assert stats["longest_streak"] == 0
        assert stats["bookmarked_count"] == 0
        assert stats["total_time_spent"] == 0
        assert stats["recently_solved"] == []

    def test_timeline_has_thirty_empty_days(self):
        timeline = compute_analytics([], now=NOW)["progress_timeline"]

        assert len(timeline) == 30
        assert all(point["count"] == 0 and point["cumulative"] == 0 for point in timeline)
        assert timeline[0]["date"] == "2026-09-20"
        assert timeline[-1]["date"] == "2026-10-19"


class TestStreaks:
    def test_single_solve_today(self):
        stats = compute_analytics([make_record(0)], now=NOW)

        assert stats["current_streak"] == 1
        assert stats["longest_streak"] == 1

    def test_three_consecutive_days_ending_today(self):
        records = [make_record(0), make_record(1), make_record(2)]

        assert compute_analytics(records, now=NOW)["current_streak"] == 3

    def test_older_solve_after_a_gap_does_not_extend(self):
        records = [make_record(0), make_record(1), make_record(2), make_record(5)]

        assert compute_analytics(records, now=NOW)["current_streak"] == 3

    def test_longest_streak_ignores_isolated_day(self):
        records = [make_record(0), make_record(1), make_record(2), make_record(10)]

        assert compute_analytics(records, now=NOW)["longest_streak"] == 3

    def test_streak_may_end_yesterday(self):
        records = [make_record(1), make_record(2)]

        assert compute_analytics(records, now=NOW)["current_streak"] == 2

    def test_streak_is_broken_when_last_solve_is_older_than_yesterday(self):
        records = [make_record(2), make_record(3)]
        stats = compute_analytics(records, now=NOW)

        assert stats["current_streak"] == 0
        assert stats["longest_streak"] == 2

    def test_several_solves_on_one_day_count_once(self):
        records = [make_record(0), make_record(0), make_record(1)]
        stats = compute_analytics(records, now=NOW)

        assert stats["current_streak"] == 2
        assert stats["longest_streak"] == 2

    def test_longest_run_in_the_past(self):
        days = active_days(make_record(n) for n in (0, 7, 8, 9, 10, 20))
        today = utc_day(NOW)

        assert longest_streak(days) == 4
        assert current_streak(days, today) == 1


class TestTimeline:
    def test_last_point_equals_total_when_all_recent(self):
        records = [make_record(0), make_record(3), make_record(3), make_record(29)]
        timeline = compute_analytics(records, now=NOW)["progress_timeline"]

        assert timeline[-1]["cumulative"] == 4
        assert timeline[0]["count"] == 1
        assert timeline[0]["cumulative"] == 1

    def test_older_solves_seed_the_running_total(self):
        records = [make_record(40), make_record(35), make_record(0)]
        timeline = compute_analytics(records, now=NOW)["progress_timeline"]

        assert timeline[0]["cumulative"] == 2
        assert timeline[-1]["count"] == 1
        assert timeline[-1]["cumulative"] == 3

    def test_days_are_utc_days(self):
        # 23:30 in New York on the 18th is already the 19th in UTC
        new_york = pytz.timezone("America/New_York")
        late_evening = new_york.localize(datetime(2026, 10, 18, 23, 30))
        stats = compute_analytics([make_record(solved_at=late_evening)], now=NOW)

        assert stats["progress_timeline"][-1] == {
            "date": "2026-10-19",
            "count": 1,
            "cumulative": 1,
        }
        assert stats["current_streak"] == 1


class TestBreakdowns:
    def test_difficulty_breakdown(self):
        records = [
            make_record(0, difficulty="Easy"),
            make_record(1, difficulty="Easy"),
            make_record(2, difficulty="Medium"),
        ]
        stats = compute_analytics(records, now=NOW)

        assert stats["difficulty_stats"] == {"Easy": 2, "Medium": 1, "Hard": 0}
        assert stats["total_solved"] == 3

    def test_top_companies_sorted_by_count_with_stable_ties(self):
        records = [
            make_record(0, company="Amazon"),
            make_record(0, company="Meta"),
            make_record(0, company="Google"),
            make_record(0, company="Google"),
        ]
        companies = compute_analytics(records, now=NOW)["top_companies"]

        assert companies == [
            {"company": "Google", "count": 2},
            {"company": "Amazon", "count": 1},
            {"company": "Meta", "count": 1},
        ]

    def test_top_companies_keeps_ten(self):
        records = [make_record(0, company=f"Company {n}") for n in range(12)]
        companies = compute_analytics(records, now=NOW)["top_companies"]

        assert len(companies) == 10
        assert companies[0]["company"] == "Company 0"

    def test_bookmarks_and_time_spent(self):
        records = [
            make_record(0, is_bookmarked=True, time_spent=25),
            make_record(1, time_spent=40),
            make_record(2, is_bookmarked=True, time_spent=None),
        ]
        stats = compute_analytics(records, now=NOW)

        assert stats["bookmarked_count"] == 2
        assert stats["total_time_spent"] == 65

    def test_recently_solved_newest_first(self):
        records = [make_record(n, title=f"P{n}") for n in (4, 0, 6, 2, 1, 3)]
        recent = compute_analytics(records, now=NOW)["recently_solved"]

        assert [item["title"] for item in recent] == ["P0", "P1", "P2", "P3", "P4"]
        assert set(recent[0]) == {"title", "difficulty", "company", "solved_at"}
