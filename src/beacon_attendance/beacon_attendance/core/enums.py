from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access checks."""

    STUDENT = "student"
    FACULTY = "faculty"


class AttendanceStatus(str, Enum):
    """Status stored on an attendance record."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"


class AttendanceMethod(str, Enum):
    """How the mark was captured."""

    BLE = "BLE"
    MANUAL = "manual"
    QR = "QR"


class DecisionError(str, Enum):
    """Rejection kinds returned by the decision engine."""

    INVALID_INPUT = "InvalidInput"
    ROOM_NOT_FOUND = "RoomNotFound"
    OUT_OF_RANGE = "OutOfRange"
    DUPLICATE_ATTENDANCE = "DuplicateAttendance"
    STORAGE_FAILURE = "StorageFailure"

    @property
    def http_status(self) -> int:
        return {
            DecisionError.INVALID_INPUT: 400,
            DecisionError.ROOM_NOT_FOUND: 404,
            DecisionError.OUT_OF_RANGE: 400,
            DecisionError.DUPLICATE_ATTENDANCE: 409,
            DecisionError.STORAGE_FAILURE: 503,
        }[self]

    @property
    def retryable(self) -> bool:
        return self in {DecisionError.OUT_OF_RANGE, DecisionError.STORAGE_FAILURE}
