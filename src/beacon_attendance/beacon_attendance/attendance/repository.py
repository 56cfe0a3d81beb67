from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    """Append-only attendance ledger.

    Day queries use the local-midnight window: start inclusive, next
    midnight exclusive. All sequences are newest first.
    """

    def append(self, new: NewAttendance) -> AttendanceRecord:
        """Assign an id and persist.

        Raises DuplicateRecordError when a valid record already exists for the
        same (student, room, day); StorageError on any backend fault.
        """

        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def by_room(self, room_id: str) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def by_room_and_day(self, room_id: str, day: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def has_valid_record(self, student_id: int, room_id: str, day: date) -> bool:
        raise NotImplementedError

    def invalidate(self, attendance_id: int) -> bool:
        """Flip is_valid to False. Returns False if missing or already void."""

        raise NotImplementedError
