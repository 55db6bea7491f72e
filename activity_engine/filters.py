"""Record filtering for the dashboard filter bar."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from activity_engine.classification import classify_activity
from activity_engine.schema import ActivityRecord
from activity_engine.work_rules import to_jakarta


def filter_records(
    records: list[ActivityRecord],
    employees: Optional[Iterable[str]] = None,
    projects: Optional[Iterable[str]] = None,
    categories: Optional[Iterable[str]] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
) -> list[ActivityRecord]:
    """Return records matching every given filter.

    Empty selections do not filter. Categories are the classifier-derived
    ones, dates are inclusive Jakarta calendar dates, and search matches
    description, task or project case-insensitively.
    """

    employee_set = set(employees or ())
    project_set = set(projects or ())
    category_set = set(categories or ())
    needle = (search or "").strip().lower()

    selected = []
    for record in records:
        if employee_set and record.employee not in employee_set:
            continue
        if project_set and record.project not in project_set:
            continue
        if category_set and classify_activity(record.description) not in category_set:
            continue
        day = to_jakarta(record.start).date()
        if start_date and day < start_date:
            continue
        if end_date and day > end_date:
            continue
        if needle and not any(needle in text.lower() for text in (record.description, record.task, record.project)):
            continue
        selected.append(record)
    return selected
