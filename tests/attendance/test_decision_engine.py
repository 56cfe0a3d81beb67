from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.beacon_attendance.beacon_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.beacon_attendance.beacon_attendance.attendance.service import AttendanceService
from src.beacon_attendance.beacon_attendance.core.enums import AttendanceMethod, AttendanceStatus, DecisionError, Role
from src.beacon_attendance.beacon_attendance.core.exceptions import (
    AuthorizationError,
    DuplicateRecordError,
    NotFoundError,
    StorageError,
    ValidationError,
)


class BrokenLedger(InMemoryAttendanceRepository):
    def has_valid_record(self, student_id, room_id, day):
        raise StorageError("connection refused")


class FailingAppendLedger(InMemoryAttendanceRepository):
    def append(self, new):
        raise StorageError("lock wait timeout")


class RacyLedger(InMemoryAttendanceRepository):
    """Pre-check says no record; the unique rule fires on insert."""

    def has_valid_record(self, student_id, room_id, day):
        return False

    def append(self, new):
        raise DuplicateRecordError("Duplicate entry for key 'uq_attendance_valid_day'")


def test_first_mark_in_range_is_accepted(engine, ledger, fixed_now):
    result = engine.mark_attendance(1, "room-a", 2.5)

    assert result.ok
    assert result.error is None
    rec = result.record
    assert rec.student_id == 1
    assert rec.room_id == "room-a"
    assert rec.proximity == 2.5
    assert rec.method == AttendanceMethod.BLE
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.is_valid is True
    assert rec.timestamp == fixed_now
    assert ledger.get_by_id(rec.attendance_id) == rec


def test_second_mark_same_day_is_duplicate_and_writes_nothing(engine, ledger, clock):
    first = engine.mark_attendance(1, "room-a", 1.0)
    clock.advance(timedelta(hours=3))
    second = engine.mark_attendance(1, "room-a", 0.5)

    assert first.ok
    assert not second.ok
    assert second.error == DecisionError.DUPLICATE_ATTENDANCE
    assert second.record is None
    assert len(ledger.by_student(1)) == 1


def test_same_student_other_room_is_independent(engine):
    assert engine.mark_attendance(1, "room-a", 1.0).ok
    assert engine.mark_attendance(1, "room-b", 1.0).ok


def test_other_student_same_room_is_independent(engine):
    assert engine.mark_attendance(1, "room-a", 1.0).ok
    assert engine.mark_attendance(2, "room-a", 1.0).ok


def test_proximity_exactly_at_threshold_is_accepted(engine):
    result = engine.mark_attendance(1, "room-a", 3.0)
    assert result.ok


def test_proximity_just_over_threshold_is_rejected(engine, ledger):
    result = engine.mark_attendance(1, "room-a", 3.0001)

    assert result.error == DecisionError.OUT_OF_RANGE
    assert "3 meters" in result.message
    assert ledger.by_student(1) == []


def test_zero_proximity_is_accepted(engine):
    assert engine.mark_attendance(1, "room-a", 0).ok


def test_unknown_room_is_rejected(engine, ledger):
    result = engine.mark_attendance(1, "room-zz", 1.0)

    assert result.error == DecisionError.ROOM_NOT_FOUND
    assert ledger.by_student(1) == []


def test_inactive_room_is_treated_as_unknown(engine, ledger):
    result = engine.mark_attendance(1, "room-x", 1.0)

    assert result.error == DecisionError.ROOM_NOT_FOUND
    assert ledger.by_room("room-x") == []


def test_room_check_runs_before_proximity_check(engine):
    result = engine.mark_attendance(1, "room-zz", 50.0)
    assert result.error == DecisionError.ROOM_NOT_FOUND


@pytest.mark.parametrize(
    "proximity",
    [float("nan"), float("inf"), -0.1, "2.0", None, True],
)
def test_invalid_proximity_is_rejected(engine, ledger, proximity):
    result = engine.mark_attendance(1, "room-a", proximity)

    assert result.error == DecisionError.INVALID_INPUT
    assert ledger.by_student(1) == []


@pytest.mark.parametrize("student_id", [0, -3, None, "1", True])
def test_invalid_student_id_is_rejected(engine, student_id):
    assert engine.mark_attendance(student_id, "room-a", 1.0).error == DecisionError.INVALID_INPUT


@pytest.mark.parametrize("room_id", ["", "   ", None, 7])
def test_invalid_room_id_is_rejected(engine, room_id):
    assert engine.mark_attendance(1, room_id, 1.0).error == DecisionError.INVALID_INPUT


def test_unknown_method_is_rejected(engine):
    result = engine.mark_attendance(1, "room-a", 1.0, "NFC")
    assert result.error == DecisionError.INVALID_INPUT


def test_method_tags_are_recorded(engine):
    assert engine.mark_attendance(1, "room-a", 1.0, "manual").record.method == AttendanceMethod.MANUAL
    assert engine.mark_attendance(1, "room-b", 1.0, AttendanceMethod.QR).record.method == AttendanceMethod.QR


def test_storage_failure_on_read_is_reported(rooms, clock):
    ledger = BrokenLedger()
    engine = AttendanceService(ledger, rooms, clock=clock)

    result = engine.mark_attendance(1, "room-a", 1.0)

    assert result.error == DecisionError.STORAGE_FAILURE
    assert result.error.retryable
    assert result.error.http_status == 503
    assert ledger.by_student(1) == []


def test_storage_failure_on_append_is_reported(rooms, clock):
    engine = AttendanceService(FailingAppendLedger(), rooms, clock=clock)

    result = engine.mark_attendance(1, "room-a", 1.0)

    assert result.error == DecisionError.STORAGE_FAILURE
    assert result.record is None


def test_duplicate_raised_by_storage_is_reported_as_duplicate(rooms, clock):
    engine = AttendanceService(RacyLedger(), rooms, clock=clock)

    result = engine.mark_attendance(1, "room-a", 1.0)

    assert result.error == DecisionError.DUPLICATE_ATTENDANCE


def test_mark_allowed_again_after_invalidation(engine, ledger):
    first = engine.mark_attendance(1, "room-a", 1.0)
    engine.invalidate_record(acting_role=Role.FACULTY, attendance_id=first.record.attendance_id)

    second = engine.mark_attendance(1, "room-a", 1.5)

    assert second.ok
    assert second.record.attendance_id != first.record.attendance_id
    assert [r.is_valid for r in ledger.by_student(1)] == [True, False]


def test_day_boundary_splits_marks(engine, clock):
    clock.set(datetime(2026, 2, 2, 23, 59, 59, 999000))
    late_night = engine.mark_attendance(1, "room-a", 1.0)

    clock.set(datetime(2026, 2, 3, 0, 0, 0))
    next_day = engine.mark_attendance(1, "room-a", 1.0)

    assert late_night.ok
    assert late_night.record.day.isoformat() == "2026-02-02"
    assert next_day.ok
    assert next_day.record.day.isoformat() == "2026-02-03"


def test_sub_millisecond_time_does_not_roll_into_next_day(engine, clock):
    clock.set(datetime(2026, 2, 2, 23, 59, 59, 999999))

    result = engine.mark_attendance(1, "room-a", 1.0)

    assert result.record.timestamp == datetime(2026, 2, 2, 23, 59, 59, 999000)
    assert result.record.day.isoformat() == "2026-02-02"


def test_timestamp_comes_from_server_clock_not_client(engine, fixed_now):
    client_time = fixed_now - timedelta(days=2)

    result = engine.mark_attendance(1, "room-a", 1.0, "BLE", client_time)

    assert result.record.timestamp == fixed_now


def test_late_status_after_grace_period(ledger, rooms, clock, fixed_now):
    engine = AttendanceService(ledger, rooms, clock=clock, grace_minutes=10)

    on_time = engine.mark_attendance(1, "room-a", 1.0, session_start=fixed_now - timedelta(minutes=5))
    late = engine.mark_attendance(2, "room-a", 1.0, session_start=fixed_now - timedelta(minutes=20))

    assert on_time.record.status == AttendanceStatus.PRESENT
    assert late.record.status == AttendanceStatus.LATE


def test_no_session_start_means_present(ledger, rooms, clock):
    engine = AttendanceService(ledger, rooms, clock=clock, grace_minutes=10)
    assert engine.mark_attendance(1, "room-a", 1.0).record.status == AttendanceStatus.PRESENT


def test_student_reads_own_history_newest_first(engine, clock):
    engine.mark_attendance(1, "room-a", 1.0)
    clock.advance(timedelta(minutes=30))
    engine.mark_attendance(1, "room-b", 1.0)

    history = engine.history_for(acting_user_id=1, acting_role=Role.STUDENT, student_id=1)

    assert [r.room_id for r in history] == ["room-b", "room-a"]


def test_student_cannot_read_other_history(engine):
    engine.mark_attendance(2, "room-a", 1.0)
    with pytest.raises(AuthorizationError):
        engine.history_for(acting_user_id=1, acting_role=Role.STUDENT, student_id=2)


def test_faculty_reads_any_history(engine):
    engine.mark_attendance(2, "room-a", 1.0)
    history = engine.history_for(acting_user_id=99, acting_role=Role.FACULTY, student_id=2)
    assert len(history) == 1


def test_invalidate_requires_faculty(engine):
    rec = engine.mark_attendance(1, "room-a", 1.0).record
    with pytest.raises(AuthorizationError):
        engine.invalidate_record(acting_role=Role.STUDENT, attendance_id=rec.attendance_id)


def test_invalidate_missing_record(engine):
    with pytest.raises(NotFoundError):
        engine.invalidate_record(acting_role=Role.FACULTY, attendance_id=404)


def test_invalidate_twice_fails(engine):
    rec = engine.mark_attendance(1, "room-a", 1.0).record
    updated = engine.invalidate_record(acting_role=Role.FACULTY, attendance_id=rec.attendance_id)

    assert updated.is_valid is False
    with pytest.raises(ValidationError):
        engine.invalidate_record(acting_role=Role.FACULTY, attendance_id=rec.attendance_id)


def test_room_day_view_without_user_lookup(engine, fixed_now):
    engine.mark_attendance(1, "room-a", 1.0)

    rows = engine.room_day_view("room-a", fixed_now.date())

    assert len(rows) == 1
    assert rows[0]["studentId"] == 1
    assert rows[0]["student"] is None
