from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import in_day
from ..core.exceptions import DuplicateRecordError
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository


def _newest_first(records) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: (r.timestamp, r.attendance_id), reverse=True)


class InMemoryAttendanceRepository(AttendanceRepository):
    """Map-backed ledger with the same unique (student, room, day) rule as the SQL table."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: dict[int, AttendanceRecord] = {}
        self._valid_keys: set[tuple[int, str, date]] = set()
        self._next_id = 1

    def append(self, new: NewAttendance) -> AttendanceRecord:
        key = (int(new.student_id), new.room_id, new.day)
        with self._lock:
            if key in self._valid_keys:
                raise DuplicateRecordError(f"Valid record exists for {key}")
            record = AttendanceRecord(
                attendance_id=self._next_id,
                student_id=int(new.student_id),
                room_id=new.room_id,
                timestamp=new.timestamp,
                proximity=float(new.proximity),
                method=new.method,
                status=new.status,
                is_valid=True,
            )
            self._next_id += 1
            self._records[record.attendance_id] = record
            self._valid_keys.add(key)
            return record

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self._records.get(int(attendance_id))

    def _snapshot(self) -> list[AttendanceRecord]:
        with self._lock:
            return list(self._records.values())

    def by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        return _newest_first(r for r in self._snapshot() if r.student_id == int(student_id))

    def by_room(self, room_id: str) -> Sequence[AttendanceRecord]:
        return _newest_first(r for r in self._snapshot() if r.room_id == room_id)

    def by_room_and_day(self, room_id: str, day: date) -> Sequence[AttendanceRecord]:
        return _newest_first(
            r for r in self._snapshot() if r.room_id == room_id and in_day(r.timestamp, day)
        )

    def has_valid_record(self, student_id: int, room_id: str, day: date) -> bool:
        with self._lock:
            return (int(student_id), room_id, day) in self._valid_keys

    def invalidate(self, attendance_id: int) -> bool:
        with self._lock:
            record = self._records.get(int(attendance_id))
            if not record or not record.is_valid:
                return False
            self._records[record.attendance_id] = replace(record, is_valid=False)
            self._valid_keys.discard((record.student_id, record.room_id, record.day))
            return True
