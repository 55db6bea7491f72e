"""Jakarta work-rule calendar and interval splitting.

Weekday (Mon-Fri, Jakarta local):
    00:00-08:00 overtime, 08:00-12:00 regular, 12:00-13:00 lunch,
    13:00-17:00 regular, 17:00-24:00 overtime.
Saturday and Sunday are weekend for the whole day.

Splitting works on whole minutes. A sub-minute remainder at the end of an
interval is dropped, so the buckets always add up to the floored duration.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from activity_engine.schema import TimeSplits

JAKARTA_OFFSET = timedelta(hours=7)
JAKARTA_TZ = timezone(JAKARTA_OFFSET, "Asia/Jakarta")

REGULAR = "regular"
LUNCH = "lunch"
OVERTIME = "overtime"
WEEKEND = "weekend"

MINUTES_PER_DAY = 24 * 60

# (end minute of day, bucket) pairs; each window starts where the previous one ends.
WEEKDAY_WINDOWS: tuple[tuple[int, str], ...] = (
    (8 * 60, OVERTIME),
    (12 * 60, REGULAR),
    (13 * 60, LUNCH),
    (17 * 60, REGULAR),
    (MINUTES_PER_DAY, OVERTIME),
)
WEEKEND_WINDOWS: tuple[tuple[int, str], ...] = ((MINUTES_PER_DAY, WEEKEND),)


def to_jakarta(value: datetime) -> datetime:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(JAKARTA_TZ)


def jakarta_date_str(value: datetime) -> str:
    return to_jakarta(value).strftime("%Y-%m-%d")


def minute_of_day(value: datetime) -> int:
    local = to_jakarta(value)
    return local.hour * 60 + local.minute


def is_jakarta_weekend(value: datetime) -> bool:
    return to_jakarta(value).weekday() >= 5


def bucket_at(minute: int, weekend: bool) -> tuple[str, int]:
    """Return the bucket active at a minute of day and the minute its window ends."""

    windows = WEEKEND_WINDOWS if weekend else WEEKDAY_WINDOWS
    for window_end, bucket in windows:
        if minute < window_end:
            return bucket, window_end
    raise ValueError(f"minute of day out of range: {minute}")


def split_activity(start: datetime, end: datetime) -> TimeSplits:
    """Split [start, end) into regular, lunch, overtime and weekend minutes."""

    splits = TimeSplits()
    current = start
    while current < end:
        bucket, boundary = bucket_at(minute_of_day(current), is_jakarta_weekend(current))
        until_boundary = boundary - minute_of_day(current)
        until_end = int((end - current).total_seconds() // 60)

        step = min(until_boundary, until_end)
        if step <= 0 and until_end > 0:
            step = 1
        if step <= 0:
            break

        if bucket == REGULAR:
            splits.regular_minutes += step
        elif bucket == LUNCH:
            splits.lunch_minutes += step
        elif bucket == OVERTIME:
            splits.overtime_minutes += step
        else:
            splits.weekend_minutes += step

        current = current + timedelta(minutes=step)

    return splits


def overlaps_lunch_gap(start: datetime, end: datetime) -> int:
    """Minutes of a gap that fall inside the weekday 12:00-13:00 lunch window."""

    return split_activity(start, end).lunch_minutes
