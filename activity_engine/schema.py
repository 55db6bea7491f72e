"""Core data schema for activity records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pydantic import AwareDatetime, NonNegativeInt
from pydantic.dataclasses import dataclass as validated_dataclass


@validated_dataclass(frozen=True)
class ActivityRecord:
    """Normalized activity record used by all metric modules."""

    id: str
    start: AwareDatetime
    end: AwareDatetime
    duration_minutes: NonNegativeInt
    employee: str
    project: str
    category: str
    description: str
    task: str


@dataclass(frozen=True)
class ParsingError:
    row: int
    message: str
    data: dict[str, Any]


@dataclass
class TimeSplits:
    regular_minutes: int = 0
    lunch_minutes: int = 0
    overtime_minutes: int = 0
    weekend_minutes: int = 0

    @property
    def total_minutes(self) -> int:
        return self.regular_minutes + self.lunch_minutes + self.overtime_minutes + self.weekend_minutes


@dataclass
class ParsingResult:
    """Outcome of normalizing one CSV batch."""

    records: list[ActivityRecord] = field(default_factory=list)
    errors: list[ParsingError] = field(default_factory=list)
    raw_rows: list[dict[str, Any]] = field(default_factory=list)
    detected_columns: list[str] = field(default_factory=list)
    total_rows: int = 0


def duration_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, clamped at zero."""

    return max(0, int((end - start).total_seconds() // 60))
