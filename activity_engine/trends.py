"""Heatmap, weekly trend and duration distribution series."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, timedelta, timezone

from activity_engine.metrics import SHORT_TASK_MINUTES
from activity_engine.schema import ActivityRecord
from activity_engine.work_rules import to_jakarta

# (label, inclusive upper bound in minutes); None means unbounded.
DURATION_BINS = (
    ("0-15m", 15),
    ("15-30m", 30),
    ("30-60m", 60),
    ("1-2h", 120),
    ("2h+", None),
)


def _week_start(value: datetime) -> date:
    """Sunday on or before the UTC calendar day of value.

    Weeks use the unshifted day while other day buckets use Jakarta time.
    """

    day = value.astimezone(timezone.utc).date()
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _week_label(day: date) -> str:
    return f"{day:%b} {day.day}"


def calculate_heatmap_data(records: list[ActivityRecord]) -> list[dict]:
    """Record counts on a Jakarta weekday x hour grid, 0 = Sunday."""

    grid = [[0] * 24 for _ in range(7)]
    for record in records:
        local = to_jakarta(record.start)
        grid[(local.weekday() + 1) % 7][local.hour] += 1

    return [
        {"day_of_week": day, "hour_of_day": hour, "value": grid[day][hour]}
        for day in range(7)
        for hour in range(24)
    ]


def calculate_weekly_trend(records: list[ActivityRecord]) -> list[dict]:
    weekly = defaultdict(int)
    for record in records:
        weekly[_week_start(record.start)] += record.duration_minutes

    return [{"week": _week_label(week), "hours": minutes / 60.0} for week, minutes in sorted(weekly.items())]


def calculate_fragmentation_trend(records: list[ActivityRecord]) -> list[dict]:
    """Share of short tasks per week."""

    totals = defaultdict(int)
    shorts = defaultdict(int)
    for record in records:
        week = _week_start(record.start)
        totals[week] += 1
        if record.duration_minutes <= SHORT_TASK_MINUTES:
            shorts[week] += 1

    return [
        {"week": _week_label(week), "index": shorts[week] / total if total else 0.0}
        for week, total in sorted(totals.items())
    ]


def calculate_duration_distribution(records: list[ActivityRecord]) -> list[dict]:
    counts = {label: 0 for label, _ in DURATION_BINS}
    for record in records:
        for label, upper in DURATION_BINS:
            if upper is None or record.duration_minutes <= upper:
                counts[label] += 1
                break
    return [{"bin": label, "count": count} for label, count in counts.items()]
