from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.locks import KeyedLock
from ..common.validators import require_finite_non_negative
from ..core.constants import PROXIMITY_THRESHOLD_METERS
from ..core.enums import AttendanceMethod, DecisionError, Role
from ..core.exceptions import (
    AuthorizationError,
    DuplicateRecordError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from ..rooms.repository import RoomRepository
from ..users.repository import UserRepository
from .factory import StatusStrategyFactory
from .model import AttendanceRecord, MarkResult, NewAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _to_millis(moment: datetime) -> datetime:
    # DATETIME(3) rounds sub-millisecond values; truncate so the stored day never shifts.
    return moment.replace(microsecond=moment.microsecond // 1000 * 1000)


class AttendanceService:
    """Attendance decision engine plus the ledger read surface.

    ``mark_attendance`` runs the gates in a fixed order and stops at the first
    failure: input, room, proximity, duplicate. Only a mark that passes all of
    them is appended. The duplicate check and the append run under a lock
    keyed by (student, room); the ledger's own uniqueness rule backs this up
    across processes.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        rooms: RoomRepository,
        users: UserRepository | None = None,
        *,
        clock: Clock | None = None,
        strategy_factory: StatusStrategyFactory | None = None,
        locks: KeyedLock | None = None,
        grace_minutes: int | None = None,
    ):
        self._attendance = attendance
        self._rooms = rooms
        self._users = users
        self._clock = clock or SystemClock()
        self._factory = strategy_factory or StatusStrategyFactory()
        self._locks = locks or KeyedLock()
        self._grace_minutes = grace_minutes

    @staticmethod
    def _parse_method(value) -> AttendanceMethod:
        if isinstance(value, AttendanceMethod):
            return value
        try:
            return AttendanceMethod(value)
        except ValueError:
            raise ValidationError(f"Unknown attendance method: {value!r}")

    @staticmethod
    def _parse_student_id(value) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError("studentId must be a positive integer")
        return value

    @staticmethod
    def _parse_room_id(value) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValidationError("roomId is required")
        return value.strip()

    def _reject(self, error: DecisionError, message: str, *, student_id, room_id) -> MarkResult:
        level = logging.WARNING if error == DecisionError.STORAGE_FAILURE else logging.INFO
        logger.log(level, "Attendance rejected (%s): student=%s room=%s: %s", error.value, student_id, room_id, message)
        return MarkResult.rejected(error, message)

    def mark_attendance(
        self,
        student_id: int,
        room_id: str,
        proximity: float,
        method: AttendanceMethod | str = AttendanceMethod.BLE,
        observed_at: Optional[datetime] = None,
        *,
        session_start: Optional[datetime] = None,
    ) -> MarkResult:
        try:
            student_id = self._parse_student_id(student_id)
            room_id = self._parse_room_id(room_id)
            distance = require_finite_non_negative(proximity, "proximity")
            tag = self._parse_method(method)
        except ValidationError as e:
            return self._reject(DecisionError.INVALID_INPUT, str(e), student_id=student_id, room_id=room_id)

        if observed_at is not None:
            logger.debug("Client-reported time %s for student=%s room=%s", observed_at, student_id, room_id)

        try:
            room = self._rooms.get_active_room(room_id)
            if not room:
                return self._reject(
                    DecisionError.ROOM_NOT_FOUND, "Room not found", student_id=student_id, room_id=room_id
                )

            if distance > PROXIMITY_THRESHOLD_METERS:
                return self._reject(
                    DecisionError.OUT_OF_RANGE,
                    f"You must be within {PROXIMITY_THRESHOLD_METERS:g} meters of the beacon to mark attendance",
                    student_id=student_id,
                    room_id=room_id,
                )

            with self._locks.hold((student_id, room.room_id)):
                now = _to_millis(self._clock.now())
                if self._attendance.has_valid_record(student_id, room.room_id, now.date()):
                    return self._reject(
                        DecisionError.DUPLICATE_ATTENDANCE,
                        "Attendance already marked for this room today",
                        student_id=student_id,
                        room_id=room_id,
                    )

                strategy = self._factory.for_mark(
                    now=now, session_start=session_start, grace_minutes=self._grace_minutes
                )
                decision = strategy.decide(now=now, session_start=session_start, grace_minutes=self._grace_minutes)

                try:
                    record = self._attendance.append(
                        NewAttendance(
                            student_id=student_id,
                            room_id=room.room_id,
                            timestamp=now,
                            proximity=distance,
                            method=tag,
                            status=decision.status,
                        )
                    )
                except DuplicateRecordError:
                    return self._reject(
                        DecisionError.DUPLICATE_ATTENDANCE,
                        "Attendance already marked for this room today",
                        student_id=student_id,
                        room_id=room_id,
                    )
        except StorageError as e:
            return self._reject(
                DecisionError.STORAGE_FAILURE,
                f"Attendance storage unavailable: {e}",
                student_id=student_id,
                room_id=room_id,
            )

        logger.info(
            "Attendance accepted: id=%s student=%s room=%s proximity=%.2f method=%s status=%s%s",
            record.attendance_id,
            record.student_id,
            record.room_id,
            record.proximity,
            record.method.value,
            record.status.value,
            f" ({decision.note})" if decision.note else "",
        )
        return MarkResult.accepted(record)

    def history_for(self, *, acting_user_id: int, acting_role: Role, student_id: int) -> Sequence[AttendanceRecord]:
        """A student's records, newest first. Students may only read their own."""
        if acting_role != Role.FACULTY and int(acting_user_id) != int(student_id):
            raise AuthorizationError("Access denied")
        return self._attendance.by_student(int(student_id))

    def room_day_records(self, room_id: str, day: date) -> Sequence[AttendanceRecord]:
        return self._attendance.by_room_and_day(room_id, day)

    def room_day_view(self, room_id: str, day: date) -> list[dict]:
        """Room-day records joined with the student's name, for the faculty live view."""
        out: list[dict] = []
        students: dict[int, Optional[dict]] = {}
        for record in self._attendance.by_room_and_day(room_id, day):
            if record.student_id not in students:
                user = self._users.get_by_id(record.student_id) if self._users else None
                students[record.student_id] = (
                    {"id": user.user_id, "name": user.full_name, "username": user.username} if user else None
                )
            row = record.to_dict()
            row["student"] = students[record.student_id]
            out.append(row)
        return out

    def invalidate_record(self, *, acting_role: Role, attendance_id: int) -> AttendanceRecord:
        if acting_role != Role.FACULTY:
            raise AuthorizationError("Faculty access required")

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")
        if not self._attendance.invalidate(record.attendance_id):
            raise ValidationError("Attendance record is already invalid")

        logger.info("Attendance invalidated: id=%s student=%s room=%s", record.attendance_id, record.student_id, record.room_id)
        return self._attendance.get_by_id(record.attendance_id) or record
