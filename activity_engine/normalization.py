"""CSV-to-record normalization."""

from __future__ import annotations

import csv
import logging
import re
from datetime import datetime, timedelta
from typing import Optional

from pydantic import ValidationError

from activity_engine.adapters.csv_adapter import read_file, read_rows
from activity_engine.adapters.sheet_fetcher import SheetFetcher
from activity_engine.classification import classify_activity
from activity_engine.config import PREVIEW_ROWS, SHEET_EXPORT_URL
from activity_engine.dates import parse_date_string
from activity_engine.schema import ActivityRecord, ParsingError, ParsingResult, duration_between

logger = logging.getLogger(__name__)

GENERIC_CATEGORIES = {"General", "Unassigned"}

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+))")


def _pick(row: dict, *names: str, default: str = "") -> str:
    """Return the first non-blank value among the aliased column names."""

    for name in names:
        value = row.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return default


def _leading_float(value: Optional[str]) -> Optional[float]:
    match = _LEADING_NUMBER.match(value or "")
    if not match:
        return None
    return float(match.group(1))


def _resolve_end(row: dict, start: datetime, start_date: str) -> datetime:
    """End from end_date/end_time, else start + duration hours, else start.

    An end time alone is read against the start date. Without an end time a
    positive duration wins over a bare end date, which would otherwise mean
    midnight.
    """

    end_date = _pick(row, "end_date")
    end_time = _pick(row, "end_time")
    duration_hours = _leading_float(row.get("duration"))
    has_duration = duration_hours is not None and duration_hours > 0
    if end_time or (end_date and not has_duration):
        end = parse_date_string(end_date or start_date, end_time)
        if end is not None:
            return end
    if has_duration:
        return start + timedelta(hours=duration_hours)
    return start


def _normalize_row(row: dict, index: int) -> ActivityRecord:
    start_date = _pick(row, "start_date", "Date")
    start_time = _pick(row, "start_time")
    employee = _pick(row, "Employee", "Owner", default="Unknown")
    project = _pick(row, "Project", default="Unassigned")
    category = _pick(row, "Task", "Category", default="General")
    description = _pick(row, "Description", "Activity")
    task = _pick(row, "Task", "TASK", default="Unspecified Task")

    start = parse_date_string(start_date, start_time)
    if start is None:
        raise ValueError("Missing or invalid start date")
    end = _resolve_end(row, start, start_date)

    if not category or category in GENERIC_CATEGORIES:
        category = classify_activity(description)

    try:
        return ActivityRecord(
            id=f"{index}-{employee}-{int(start.timestamp() * 1000)}",
            start=start,
            end=end,
            duration_minutes=duration_between(start, end),
            employee=employee,
            project=project,
            category=category,
            description=description,
            task=task,
        )
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ValueError(f"Schema validation failed: {details}") from exc


def normalize_csv_text(text: str) -> ParsingResult:
    """Normalize CSV text into records, collecting per-row errors."""

    try:
        detected_columns, rows = read_rows(text)
    except (csv.Error, ValueError) as exc:
        logger.warning("CSV parsing failed: %s", exc)
        return ParsingResult(errors=[ParsingError(row=0, message=f"CSV Parsing Error: {exc}", data={})])

    result = ParsingResult(
        raw_rows=rows[:PREVIEW_ROWS],
        detected_columns=detected_columns,
        total_rows=len(rows),
    )
    for index, row in enumerate(rows):
        try:
            result.records.append(_normalize_row(row, index))
        except Exception as exc:  # noqa: BLE001
            logger.debug("Row %d rejected: %s", index + 2, exc)
            result.errors.append(ParsingError(row=index + 2, message=str(exc), data=row))

    logger.info(
        "Normalized %d of %d rows (%d errors)", len(result.records), result.total_rows, len(result.errors)
    )
    return result


def normalize_csv_file(file_path: str) -> ParsingResult:
    """Normalize a local CSV export."""

    return normalize_csv_text(read_file(file_path))


def resolve_source_url(source: str) -> str:
    """Full URLs pass through; anything else is treated as a spreadsheet id."""

    source = source.strip()
    if source.startswith("http"):
        return source
    return SHEET_EXPORT_URL.format(sheet_id=source)


def fetch_and_normalize_data(source: str, fetcher: Optional[SheetFetcher] = None) -> ParsingResult:
    """Fetch a CSV source and normalize it.

    Network failures propagate as FetchError; everything after the fetch is
    reported through the result's error list.
    """

    url = resolve_source_url(source)
    fetcher = fetcher or SheetFetcher()
    text = fetcher.fetch(url)
    return normalize_csv_text(text)
