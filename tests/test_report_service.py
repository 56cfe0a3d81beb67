from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.beacon_attendance.beacon_attendance.attendance.service import AttendanceService
from src.beacon_attendance.beacon_attendance.core.enums import Role
from src.beacon_attendance.beacon_attendance.core.exceptions import ValidationError
from src.beacon_attendance.beacon_attendance.reports.csv_export import report_filename, write_report_csv
from src.beacon_attendance.beacon_attendance.reports.model import ReportOptions
from src.beacon_attendance.beacon_attendance.reports.service import ReportService
from src.beacon_attendance.beacon_attendance.users.memory_user_repository import InMemoryUserRepository


@pytest.fixture
def users():
    repo = InMemoryUserRepository()
    repo.create_user(username="STU1", full_name="Jane Doe", password_hash="x", role=Role.STUDENT)
    repo.create_user(username="STU2", full_name="John Smith", password_hash="x", role=Role.STUDENT)
    repo.create_user(username="FAC1", full_name="Dr. Williams", password_hash="x", role=Role.FACULTY)
    return repo


@pytest.fixture
def reports(ledger, rooms, users):
    return ReportService(ledger, rooms, users)


@pytest.fixture
def marking(ledger, rooms, users, clock):
    return AttendanceService(ledger, rooms, users, clock=clock)


def test_report_rows_and_absentees(reports, marking, fixed_now):
    marking.mark_attendance(1, "room-a", 1.0)

    data = reports.build_report(["room-a"], fixed_now.date(), fixed_now.date())

    assert [(r["student_id"], r["status"]) for r in data.rows] == [(1, "present"), (2, "absent")]
    present = data.rows[0]
    assert present["full_name"] == "Jane Doe"
    assert present["time"] == "09:00:00"
    assert present["proximity"] == "1.00"
    assert present["method"] == "BLE"
    assert data.rows[1]["time"] == "-"


def test_report_summary_uses_roster_size(reports, marking, fixed_now):
    marking.mark_attendance(1, "room-a", 1.0)

    data = reports.build_report(["room-a"], fixed_now.date(), fixed_now.date())

    assert data.summary == [
        {
            "room_id": "room-a",
            "room_name": "Computer Science Lab",
            "days": 1,
            "present": 1,
            "late": 0,
            "absent": 1,
            "total": 2,
            "attendance_rate": "50%",
        }
    ]


def test_report_orders_rooms_as_given_and_days_ascending(reports, marking, clock, fixed_now):
    marking.mark_attendance(1, "room-a", 1.0)
    marking.mark_attendance(1, "room-b", 1.0)
    clock.advance(timedelta(days=1))
    marking.mark_attendance(2, "room-a", 1.0)

    start = fixed_now.date()
    data = reports.build_report(
        ["room-b", "room-a"], start, start + timedelta(days=1), ReportOptions(include_absent=False)
    )

    assert [(r["room_id"], r["date"], r["student_id"]) for r in data.rows] == [
        ("room-b", "2026-02-02", 1),
        ("room-a", "2026-02-02", 1),
        ("room-a", "2026-02-03", 2),
    ]
    assert [s["room_id"] for s in data.summary] == ["room-b", "room-a"]
    assert data.summary[1]["days"] == 2
    assert data.summary[1]["present"] == 2
    assert data.summary[1]["total"] == 4


def test_report_skips_invalidated_records(reports, marking, fixed_now):
    rec = marking.mark_attendance(1, "room-a", 1.0).record
    marking.invalidate_record(acting_role=Role.FACULTY, attendance_id=rec.attendance_id)

    data = reports.build_report(["room-a"], fixed_now.date(), fixed_now.date())

    assert {r["status"] for r in data.rows} == {"absent"}
    assert data.summary[0]["present"] == 0


def test_report_without_stats_has_no_summary(reports, fixed_now):
    data = reports.build_report(["room-a"], fixed_now.date(), fixed_now.date(), ReportOptions(include_stats=False))
    assert data.summary == []


def test_report_total_enrolled_override(reports, marking, fixed_now):
    marking.mark_attendance(1, "room-a", 1.0)

    data = reports.build_report(
        ["room-a"], fixed_now.date(), fixed_now.date(), ReportOptions(include_absent=False, total_enrolled=4)
    )

    assert data.summary[0]["total"] == 4
    assert data.summary[0]["attendance_rate"] == "25%"


def test_report_validation_errors(reports):
    with pytest.raises(ValidationError):
        reports.build_report([], date(2026, 2, 1), date(2026, 2, 2))
    with pytest.raises(ValidationError):
        reports.build_report(["nope"], date(2026, 2, 1), date(2026, 2, 2))
    with pytest.raises(ValidationError):
        reports.build_report(["room-a"], date(2026, 2, 3), date(2026, 2, 2))


def test_csv_has_bom_header_and_summary_block(reports, marking, fixed_now):
    marking.mark_attendance(1, "room-a", 1.0)
    data = reports.build_report(["room-a"], fixed_now.date(), fixed_now.date())

    raw = write_report_csv(data)

    assert raw.startswith(b"\xef\xbb\xbf")
    text = raw.decode("utf-8-sig")
    lines = text.splitlines()
    assert lines[0].startswith("room_id,room_name,date,attendance_id")
    assert "" in lines
    assert any(line.startswith("room_id,room_name,days,present") for line in lines)
    assert lines[-1].endswith(",50%")


def test_report_filename():
    assert (
        report_filename(datetime(2026, 2, 1), datetime(2026, 2, 7))
        == "attendance_report_2026-02-01_to_2026-02-07.csv"
    )


def test_report_range_is_capped(reports):
    start = date(2025, 1, 1)

    full_year = reports.build_report(["room-a"], start, start + timedelta(days=365), ReportOptions(include_absent=False))
    assert full_year.summary[0]["days"] == 366

    with pytest.raises(ValidationError):
        reports.build_report(["room-a"], start, start + timedelta(days=366))
