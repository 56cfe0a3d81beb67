from __future__ import annotations

from datetime import datetime

import pytest

from src.beacon_attendance.beacon_attendance.attendance.memory_attendance_repository import InMemoryAttendanceRepository
from src.beacon_attendance.beacon_attendance.attendance.service import AttendanceService
from src.beacon_attendance.beacon_attendance.common.clock import FixedClock
from src.beacon_attendance.beacon_attendance.rooms.memory_room_repository import InMemoryRoomRepository
from src.beacon_attendance.beacon_attendance.rooms.model import Room


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def rooms() -> InMemoryRoomRepository:
    return InMemoryRoomRepository(
        [
            Room(room_id="room-a", name="Computer Science Lab", beacon_id="BEACON-CS-001"),
            Room(room_id="room-b", name="Physics Lab", beacon_id="BEACON-PH-002"),
            Room(room_id="room-x", name="Closed Lab", beacon_id="BEACON-XX-999", is_active=False),
        ]
    )


@pytest.fixture
def ledger() -> InMemoryAttendanceRepository:
    return InMemoryAttendanceRepository()


@pytest.fixture
def engine(ledger, rooms, clock) -> AttendanceService:
    return AttendanceService(ledger, rooms, clock=clock)
