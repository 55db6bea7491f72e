"""Volume, time-allocation and behavior metrics."""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date

import numpy as np

from activity_engine.classification import classify_activity, is_planned, is_strategic
from activity_engine.schema import ActivityRecord
from activity_engine.work_rules import jakarta_date_str, minute_of_day, split_activity

SHORT_TASK_MINUTES = 30
DEEP_WORK_MINUTES = 120
TOP_DESCRIPTIONS = 10


def _ratio(part: float, whole: float) -> float:
    return part / whole if whole else 0.0


def _to_hours(minutes_by_key: dict) -> dict[str, float]:
    return {key: minutes / 60.0 for key, minutes in minutes_by_key.items()}


def minutes_to_hhmm(total_minutes: float) -> str:
    hours, minutes = divmod(int(total_minutes), 60)
    return f"{hours:02d}:{minutes:02d}"


def calculate_volume_metrics(records: list[ActivityRecord]) -> dict:
    """Count records by Jakarta day, employee, project, category and description."""

    by_day = Counter()
    by_employee = Counter()
    by_project = Counter()
    by_category = Counter()
    by_description = Counter()

    for record in records:
        by_day[jakarta_date_str(record.start)] += 1
        by_employee[record.employee] += 1
        by_project[record.project] += 1
        by_category[classify_activity(record.description)] += 1
        by_description[record.description] += 1

    # sorted() is stable, so ties keep first-seen order.
    ranked = sorted(by_description.items(), key=lambda item: item[1], reverse=True)[:TOP_DESCRIPTIONS]

    return {
        "total_count": len(records),
        "count_by_day": dict(by_day),
        "count_by_employee": dict(by_employee),
        "count_by_project": dict(by_project),
        "count_by_category": dict(by_category),
        "top_descriptions": [{"text": text, "count": count} for text, count in ranked],
        "activity_density": _ratio(len(records), len(by_day)),
    }


def calculate_time_metrics(records: list[ActivityRecord]) -> dict:
    """Sum logged time into work-rule buckets and task-shape ratios."""

    total_minutes = 0
    regular = lunch = overtime = weekend = 0
    strategic_minutes = 0
    planned_minutes = 0
    short_tasks = 0
    deep_tasks = 0
    overtime_tasks = 0

    by_employee = defaultdict(int)
    by_project = defaultdict(int)
    by_description = defaultdict(int)
    by_category = defaultdict(int)
    durations: list[int] = []
    active_days: set[str] = set()

    for record in records:
        minutes = record.duration_minutes
        total_minutes += minutes
        durations.append(minutes)

        splits = split_activity(record.start, record.end)
        regular += splits.regular_minutes
        lunch += splits.lunch_minutes
        overtime += splits.overtime_minutes
        weekend += splits.weekend_minutes
        if splits.overtime_minutes > 0:
            overtime_tasks += 1

        by_employee[record.employee] += minutes
        by_project[record.project] += minutes
        by_description[record.description] += minutes

        category = classify_activity(record.description)
        by_category[category] += minutes
        if is_strategic(category):
            strategic_minutes += minutes
        if is_planned(record.description, record.project):
            planned_minutes += minutes

        if minutes <= SHORT_TASK_MINUTES:
            short_tasks += 1
        if minutes >= DEEP_WORK_MINUTES:
            deep_tasks += 1

        active_days.add(jakarta_date_str(record.start))

    active_workdays = sum(1 for day in active_days if date.fromisoformat(day).weekday() < 5)
    task_count = len(records)
    total_hours = total_minutes / 60.0
    short_ratio = _ratio(short_tasks, task_count)

    return {
        "total_hours": total_hours,
        "net_working_hours": regular / 60.0,
        "work_during_lunch_hours": lunch / 60.0,
        "weekday_overtime_hours": overtime / 60.0,
        "weekend_work_hours": weekend / 60.0,
        "avg_hours_per_day": _ratio(regular / 60.0, active_workdays),
        "avg_hours_per_active_day": _ratio(total_hours, len(active_days)),
        "hours_by_employee": _to_hours(by_employee),
        "hours_by_project": _to_hours(by_project),
        "hours_by_description": _to_hours(by_description),
        "avg_duration_per_task": _ratio(total_minutes, task_count),
        "median_duration_per_task": float(np.median(durations)) if durations else 0.0,
        "short_task_ratio": short_ratio,
        "deep_work_ratio": _ratio(deep_tasks, task_count),
        "fragmentation_index": short_ratio,
        "hours_by_category": _to_hours(by_category),
        "meeting_hours": by_category.get("Meeting", 0) / 60.0,
        "strategic_hours": strategic_minutes / 60.0,
        "planned_hours": planned_minutes / 60.0,
        "overtime_count": overtime_tasks,
    }


def calculate_behavior_metrics(records: list[ActivityRecord]) -> list[dict]:
    """Average clock-in/out and effort consistency per employee."""

    by_employee: dict[str, dict[str, list[ActivityRecord]]] = defaultdict(lambda: defaultdict(list))
    for record in records:
        by_employee[record.employee][jakarta_date_str(record.start)].append(record)

    patterns = []
    for employee, days in by_employee.items():
        clock_ins = []
        clock_outs = []
        daily_hours = []
        for day_records in days.values():
            clock_ins.append(minute_of_day(min(r.start for r in day_records)))
            clock_outs.append(minute_of_day(max(r.end for r in day_records)))
            daily_hours.append(sum(r.duration_minutes for r in day_records) / 60.0)

        avg_daily = float(np.mean(daily_hours))
        # Population standard deviation (ddof=0).
        cv = float(np.std(daily_hours)) / avg_daily if avg_daily else 0.0

        patterns.append(
            {
                "employee": employee,
                "avg_clock_in": minutes_to_hhmm(sum(clock_ins) / len(clock_ins)),
                "avg_clock_out": minutes_to_hhmm(sum(clock_outs) / len(clock_outs)),
                "avg_daily_hours": avg_daily,
                "effort_consistency": max(0.0, 100.0 * (1.0 - cv)),
            }
        )
    return patterns
