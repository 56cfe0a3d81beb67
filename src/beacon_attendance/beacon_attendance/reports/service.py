from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..analytics.model import RoomStats
from ..analytics.stats import combine_stats, compute_stats
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_days
from ..core.constants import MAX_REPORT_DAYS
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import ValidationError
from ..rooms.model import Room
from ..rooms.repository import RoomRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import ReportData, ReportOptions


class ReportService:
    """Shapes ledger data into report rows; serialization lives in csv_export."""

    def __init__(self, attendance: AttendanceRepository, rooms: RoomRepository, users: UserRepository):
        self._attendance = attendance
        self._rooms = rooms
        self._users = users

    def _resolve_rooms(self, room_ids: Sequence[str]) -> list[Room]:
        if not room_ids:
            raise ValidationError("Select at least one room")
        rooms: list[Room] = []
        for room_id in room_ids:
            room = self._rooms.get_by_id(room_id)
            if not room:
                raise ValidationError(f"Unknown room: {room_id}")
            rooms.append(room)
        return rooms

    @staticmethod
    def _record_row(room: Room, day: date, record: AttendanceRecord, student: Optional[User]) -> dict:
        return {
            "room_id": room.room_id,
            "room_name": room.name,
            "date": day.strftime("%Y-%m-%d"),
            "attendance_id": record.attendance_id,
            "student_id": record.student_id,
            "full_name": student.full_name if student else "-",
            "username": student.username if student else "-",
            "time": record.timestamp.strftime("%H:%M:%S"),
            "proximity": f"{record.proximity:.2f}",
            "method": record.method.value,
            "status": record.status.value,
        }

    @staticmethod
    def _absent_row(room: Room, day: date, student: User) -> dict:
        return {
            "room_id": room.room_id,
            "room_name": room.name,
            "date": day.strftime("%Y-%m-%d"),
            "attendance_id": "",
            "student_id": student.user_id,
            "full_name": student.full_name,
            "username": student.username,
            "time": "-",
            "proximity": "",
            "method": "-",
            "status": AttendanceStatus.ABSENT.value,
        }

    @staticmethod
    def _summary_row(room: Room, days: int, stats: RoomStats) -> dict:
        return {
            "room_id": room.room_id,
            "room_name": room.name,
            "days": days,
            "present": stats.present,
            "late": stats.late,
            "absent": stats.absent,
            "total": stats.total,
            "attendance_rate": f"{stats.attendance_rate_percent}%",
        }

    def build_report(
        self,
        room_ids: Sequence[str],
        start_day: date,
        end_day: date,
        options: ReportOptions | None = None,
    ) -> ReportData:
        options = options or ReportOptions()
        if start_day > end_day:
            raise ValidationError("Start date must not be after end date")
        if (end_day - start_day).days + 1 > MAX_REPORT_DAYS:
            raise ValidationError(f"Report range must not exceed {MAX_REPORT_DAYS} days")

        rooms = self._resolve_rooms(room_ids)
        roster = list(self._users.list_by_role(Role.STUDENT))
        total_enrolled = len(roster) if options.total_enrolled is None else int(options.total_enrolled)

        users_cache: dict[int, Optional[User]] = {u.user_id: u for u in roster}

        def lookup(student_id: int) -> Optional[User]:
            if student_id not in users_cache:
                users_cache[student_id] = self._users.get_by_id(student_id)
            return users_cache[student_id]

        days = list(iter_days(start_day, end_day))
        out_rows: list[dict] = []
        summary: list[dict] = []

        for room in rooms:
            day_stats: list[RoomStats] = []
            for day in days:
                records = [r for r in self._attendance.by_room_and_day(room.room_id, day) if r.is_valid]

                for r in records:
                    out_rows.append(self._record_row(room, day, r, lookup(r.student_id)))

                if options.include_absent:
                    marked = {r.student_id for r in records}
                    for student in roster:
                        if student.user_id not in marked:
                            out_rows.append(self._absent_row(room, day, student))

                if options.include_stats:
                    day_stats.append(compute_stats(records, total_enrolled))

            if options.include_stats:
                summary.append(self._summary_row(room, len(days), combine_stats(day_stats)))

        return ReportData(rows=out_rows, summary=summary)
