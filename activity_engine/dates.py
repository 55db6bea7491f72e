"""Date/time parsing for spreadsheet-exported activity logs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as dateutil_parser

DEFAULT_TIME = "00:00:00"

# dateutil fills missing fields from its default; two distinct defaults expose
# a date that was not actually in the text.
_FALLBACK_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# Tried in order; the first format that matches the whole string wins.
DATETIME_FORMATS = (
    "%d-%b-%y %I:%M:%S %p",  # 3-Nov-25 8:00:00 AM
    "%d-%b-%y %H:%M:%S",
    "%d-%b-%y %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%m/%d/%Y %I:%M:%S %p",
)

DATE_FORMATS = (
    "%d-%b-%y",
    "%Y-%m-%d",
    "%m/%d/%Y",
)


def _clean(value: Optional[str]) -> str:
    if not value:
        return ""
    return " ".join(str(value).split())


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _try_formats(text: str, formats: tuple[str, ...]) -> Optional[datetime]:
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def parse_date_string(date_str: Optional[str], time_str: Optional[str] = None) -> Optional[datetime]:
    """Parse a date and optional time into a UTC-anchored datetime.

    Naive values are taken to already be in the shared absolute frame, so no
    offset is applied here. Returns None when nothing parses.
    """

    clean_date = _clean(date_str)
    if not clean_date:
        return None
    clean_time = _clean(time_str)
    combined = f"{clean_date} {clean_time or DEFAULT_TIME}"

    parsed = _try_formats(combined, DATETIME_FORMATS)
    if parsed is None:
        parsed = _try_formats(clean_date, DATE_FORMATS)
    if parsed is None:
        parsed = _parse_free_form(f"{clean_date} {clean_time}" if clean_time else clean_date)
    if parsed is None:
        return None
    return _as_utc(parsed)


def _parse_free_form(text: str) -> Optional[datetime]:
    """Last-resort parse; None unless the text itself carries a full date."""

    try:
        first, second = (dateutil_parser.parse(text, default=default) for default in _FALLBACK_DEFAULTS)
    except (ValueError, OverflowError):
        return None
    if first.date() != second.date():
        return None
    return first
