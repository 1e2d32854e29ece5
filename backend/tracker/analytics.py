# backend/tracker/analytics.py
"""
Dashboard statistics derived from one user's problem records.

Everything here is a pure function of the records passed in (and of `now`),
so it can be computed for any user without touching the database again.
Calendar days are always UTC days: the timeline buckets and the streak
comparisons use the same boundary.
"""
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import pytz

from .models import ProblemRecord

TIMELINE_DAYS = 30
TOP_COMPANIES_LIMIT = 10
RECENTLY_SOLVED_LIMIT = 5


def utc_day(moment: datetime) -> date:
    """The UTC calendar day a timestamp falls on. Naive values are taken as UTC."""
    if moment.tzinfo is None:
        return pytz.UTC.localize(moment).date()
    return moment.astimezone(pytz.UTC).date()


def difficulty_breakdown(records: List[Any]) -> Dict[str, int]:
    stats = {difficulty: 0 for difficulty in ProblemRecord.Difficulty.values}
    for record in records:
        if record.difficulty in stats:
            stats[record.difficulty] += 1
    return stats


def top_companies(records: List[Any], limit: int = TOP_COMPANIES_LIMIT) -> List[Dict[str, Any]]:
    # Counter keeps first-seen order and most_common() sorts stably,
    # so companies with equal counts stay in the order they were first seen.
    counts = Counter(record.company for record in records)
    return [
        {"company": company, "count": count}
        for company, count in counts.most_common(limit)
    ]


def progress_timeline(
    records: List[Any], today: date, days: int = TIMELINE_DAYS
) -> List[Dict[str, Any]]:
    """
    One point per day for the `days` days ending today (inclusive), each with
    the number of problems solved that day and the running total.

    The running total is seeded with everything solved before the window, so
    the last point's cumulative value is the overall total.
    """
    first_day = today - timedelta(days=days - 1)
    per_day = Counter(
        day
        for day in (utc_day(record.solved_at) for record in records)
        if first_day <= day <= today
    )

    cumulative = len(records) - sum(per_day.values())
    timeline = []
    for offset in range(days):
        day = first_day + timedelta(days=offset)
        count = per_day.get(day, 0)
        cumulative += count
        timeline.append(
            {"date": day.isoformat(), "count": count, "cumulative": cumulative}
        )
    return timeline


def active_days(records: Iterable[Any]) -> List[date]:
    """Distinct days with at least one solve, oldest first."""
    return sorted({utc_day(record.solved_at) for record in records})


def current_streak(days: List[date], today: date) -> int:
    """
    Consecutive active days ending today, or ending yesterday when nothing
    has been solved yet today. `days` must be sorted ascending.
    """
    if not days:
        return 0

    latest = days[-1]
    if latest not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    expected = latest
    for day in reversed(days[:-1]):
        expected -= timedelta(days=1)
        if day != expected:
            break
        streak += 1
    return streak


def longest_streak(days: List[date]) -> int:
    """Longest run of consecutive active days. `days` must be sorted ascending."""
    longest = 0
    run = 0
    previous = None
    for day in days:
        if previous is not None and (day - previous).days == 1:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day
    return longest


def recently_solved(records: List[Any], limit: int = RECENTLY_SOLVED_LIMIT) -> List[Dict[str, Any]]:
    latest = sorted(records, key=lambda record: record.solved_at, reverse=True)[:limit]
    return [
        {
            "title": record.title,
            "difficulty": record.difficulty,
            "company": record.company,
            "solved_at": record.solved_at,
        }
        for record in latest
    ]


def compute_analytics(records: Iterable[Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Builds the dashboard statistics for one user's full record set.

    `records` can be any iterable of objects carrying the ProblemRecord
    attributes (title, difficulty, company, solved_at, is_bookmarked,
    time_spent). `now` defaults to the current time.
    """
    records = list(records)
    if now is None:
        now = datetime.now(pytz.UTC)
    today = utc_day(now)
    days = active_days(records)

    return {
        "total_solved": len(records),
        "difficulty_stats": difficulty_breakdown(records),
        "top_companies": top_companies(records),
        "progress_timeline": progress_timeline(records, today),
        "current_streak": current_streak(days, today),
        "longest_streak": longest_streak(days),
        "bookmarked_count": sum(1 for record in records if record.is_bookmarked),
        "total_time_spent": sum(record.time_spent or 0 for record in records),
        "recently_solved": recently_solved(records),
    }
