"""Per-day and per-project drilldown aggregates."""

from __future__ import annotations

from collections import defaultdict
from datetime import date

from activity_engine.schema import ActivityRecord
from activity_engine.work_rules import jakarta_date_str, overlaps_lunch_gap, to_jakarta

# Gaps of this length or longer are separate sessions, not breaks.
MAX_BREAK_MINUTES = 4 * 60
TOP_PROJECT_DESCRIPTIONS = 50


def _group_by_day(records: list[ActivityRecord]) -> dict[str, list[ActivityRecord]]:
    days: dict[str, list[ActivityRecord]] = defaultdict(list)
    for record in records:
        days[jakarta_date_str(record.start)].append(record)
    return {day: sorted(day_records, key=lambda r: r.start) for day, day_records in sorted(days.items())}


def _gaps(day_records: list[ActivityRecord]):
    """Yield (previous_end, next_start, minutes) for gaps that count as breaks."""

    for current, following in zip(day_records, day_records[1:]):
        minutes = (following.start - current.end).total_seconds() / 60.0
        if 0 < minutes < MAX_BREAK_MINUTES:
            yield current.end, following.start, minutes


def _decimal_hour(value) -> float:
    local = to_jakarta(value)
    return local.hour + local.minute / 60.0


def calculate_daily_behavior_series(records: list[ActivityRecord]) -> list[dict]:
    """Clock-in, clock-out (decimal Jakarta hours) and break time per day."""

    series = []
    for day, day_records in _group_by_day(records).items():
        first, last = day_records[0], day_records[-1]
        clock_in = _decimal_hour(first.start)
        clock_out = _decimal_hour(last.end)
        if clock_out < clock_in:
            clock_out = clock_in + first.duration_minutes / 60.0

        break_minutes = sum(minutes for _, _, minutes in _gaps(day_records))
        series.append(
            {
                "date": day,
                "clock_in": clock_in,
                "clock_out": clock_out,
                "break_hours": break_minutes / 60.0,
            }
        )
    return series


def calculate_employee_daily_timeline(records: list[ActivityRecord]) -> list[dict]:
    """Daily rows for one employee's drilldown.

    On workdays the part of a gap inside the 12:00-13:00 lunch window is not
    counted as break time.
    """

    timeline = []
    for day, day_records in _group_by_day(records).items():
        workday = date.fromisoformat(day).weekday() < 5
        break_minutes = 0.0
        for gap_start, gap_end, minutes in _gaps(day_records):
            if workday:
                minutes = max(0.0, minutes - overlaps_lunch_gap(gap_start, gap_end))
            break_minutes += minutes

        timeline.append(
            {
                "date": day,
                "first_activity": to_jakarta(day_records[0].start).strftime("%H:%M"),
                "last_activity": to_jakarta(day_records[-1].end).strftime("%H:%M"),
                "logged_hours": sum(r.duration_minutes for r in day_records) / 60.0,
                "break_hours": break_minutes / 60.0,
                "task_count": len(day_records),
            }
        )
    return timeline


def calculate_project_stats(records: list[ActivityRecord]) -> dict:
    """Top descriptions and contributor shares for one project's records."""

    desc_counts = defaultdict(int)
    desc_minutes = defaultdict(int)
    contributor_minutes = defaultdict(int)
    total_minutes = 0
    for record in records:
        desc_counts[record.description] += 1
        desc_minutes[record.description] += record.duration_minutes
        contributor_minutes[record.employee] += record.duration_minutes
        total_minutes += record.duration_minutes

    top_descriptions = sorted(
        (
            {"desc": desc, "count": desc_counts[desc], "hours": desc_minutes[desc] / 60.0}
            for desc in desc_counts
        ),
        key=lambda item: item["hours"],
        reverse=True,
    )[:TOP_PROJECT_DESCRIPTIONS]

    contributors = sorted(
        (
            {
                "name": name,
                "hours": minutes / 60.0,
                "share": minutes / total_minutes if total_minutes else 0.0,
            }
            for name, minutes in contributor_minutes.items()
        ),
        key=lambda item: item["hours"],
        reverse=True,
    )

    return {"top_descriptions": top_descriptions, "contributors": contributors}


def calculate_project_performance(records: list[ActivityRecord]) -> list[dict]:
    minutes_by_project = defaultdict(int)
    count_by_project = defaultdict(int)
    total_minutes = 0
    for record in records:
        minutes_by_project[record.project] += record.duration_minutes
        count_by_project[record.project] += 1
        total_minutes += record.duration_minutes

    performance = [
        {
            "name": name,
            "hours": minutes / 60.0,
            "share": minutes / total_minutes if total_minutes else 0.0,
            "count": count_by_project[name],
        }
        for name, minutes in minutes_by_project.items()
    ]
    return sorted(performance, key=lambda item: item["hours"], reverse=True)
