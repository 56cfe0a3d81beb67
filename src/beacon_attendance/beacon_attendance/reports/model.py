from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

REPORT_FIELDS = [
    "room_id",
    "room_name",
    "date",
    "attendance_id",
    "student_id",
    "full_name",
    "username",
    "time",
    "proximity",
    "method",
    "status",
]

SUMMARY_FIELDS = [
    "room_id",
    "room_name",
    "days",
    "present",
    "late",
    "absent",
    "total",
    "attendance_rate",
]


@dataclass(frozen=True)
class ReportOptions:
    include_absent: bool = True
    include_stats: bool = True
    # Roster size per day; defaults to the number of active students.
    total_enrolled: Optional[int] = None


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
