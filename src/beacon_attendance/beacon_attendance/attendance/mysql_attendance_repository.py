from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import day_window
from ..core.enums import AttendanceMethod, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, room_id, `timestamp`, proximity, method, status, is_valid"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        room_id=str(r["room_id"]),
        timestamp=r["timestamp"],
        proximity=float(r["proximity"]),
        method=AttendanceMethod(r["method"]),
        status=AttendanceStatus(r["status"]),
        is_valid=bool(r.get("is_valid", True)),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    """Ledger on the ``attendance_records`` table.

    The unique key on (student_id, room_id, valid_day) turns a concurrent
    second insert into a duplicate-key error, surfaced by ``db_cursor`` as
    DuplicateRecordError.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, new: NewAttendance) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, room_id, `timestamp`, proximity, method, status, is_valid)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    int(new.student_id),
                    new.room_id,
                    new.timestamp,
                    float(new.proximity),
                    new.method.value,
                    new.status.value,
                ),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            attendance_id=attendance_id,
            student_id=int(new.student_id),
            room_id=new.room_id,
            timestamp=new.timestamp,
            proximity=float(new.proximity),
            method=new.method,
            status=new.status,
            is_valid=True,
        )

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s",
                (int(attendance_id),),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def by_student(self, student_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s
                ORDER BY `timestamp` DESC, attendance_id DESC
                """,
                (int(student_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def by_room(self, room_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE room_id=%s
                ORDER BY `timestamp` DESC, attendance_id DESC
                """,
                (room_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def by_room_and_day(self, room_id: str, day: date) -> Sequence[AttendanceRecord]:
        start, end = day_window(day)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE room_id=%s AND `timestamp` >= %s AND `timestamp` < %s
                ORDER BY `timestamp` DESC, attendance_id DESC
                """,
                (room_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def has_valid_record(self, student_id: int, room_id: str, day: date) -> bool:
        start, end = day_window(day)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 AS found
                FROM attendance_records
                WHERE student_id=%s AND room_id=%s AND is_valid=1
                  AND `timestamp` >= %s AND `timestamp` < %s
                LIMIT 1
                """,
                (int(student_id), room_id, start, end),
            )
            return fetchone(cur) is not None

    def invalidate(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET is_valid=0 WHERE attendance_id=%s AND is_valid=1",
                (int(attendance_id),),
            )
            return cur.rowcount > 0
