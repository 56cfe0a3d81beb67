from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceMethod, AttendanceStatus, DecisionError


@dataclass(frozen=True)
class NewAttendance:
    """A mark accepted by the engine, not yet stored."""

    student_id: int
    room_id: str
    timestamp: datetime
    proximity: float
    method: AttendanceMethod
    status: AttendanceStatus

    @property
    def day(self) -> date:
        return self.timestamp.date()


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: stored attendance record (append-only)."""

    attendance_id: int
    student_id: int
    room_id: str
    timestamp: datetime
    proximity: float
    method: AttendanceMethod
    status: AttendanceStatus
    is_valid: bool = True

    @property
    def day(self) -> date:
        return self.timestamp.date()

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "roomId": self.room_id,
            "timestamp": self.timestamp.isoformat(timespec="milliseconds"),
            "proximity": self.proximity,
            "method": self.method.value,
            "status": self.status.value,
            "isValid": self.is_valid,
        }


@dataclass(frozen=True)
class MarkResult:
    """Outcome of ``AttendanceService.mark_attendance``.

    Exactly one of ``record`` / ``error`` is set.
    """

    record: Optional[AttendanceRecord] = None
    error: Optional[DecisionError] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def accepted(cls, record: AttendanceRecord) -> "MarkResult":
        return cls(record=record, message="Attendance marked")

    @classmethod
    def rejected(cls, error: DecisionError, message: str) -> "MarkResult":
        return cls(error=error, message=message)
