from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .analytics.service import AnalyticsService
from .attendance.factory import StatusStrategyFactory
from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .database.connection import DBConfig, DatabaseConnection
from .reports.service import ReportService
from .rooms.memory_room_repository import InMemoryRoomRepository
from .rooms.mysql_room_repository import MySQLRoomRepository
from .rooms.repository import RoomRepository
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    clock: Clock

    users_repo: UserRepository
    rooms_repo: RoomRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    analytics_service: AnalyticsService
    report_service: ReportService


def build_container(
    *,
    db_config: Optional[dict] = None,
    storage_backend: str = "mysql",
    clock: Clock | None = None,
    grace_minutes: int | None = None,
) -> Container:
    clock = clock or SystemClock()
    conn: Optional[DatabaseConnection] = None
    if storage_backend == "memory":
        users_repo = InMemoryUserRepository()
        rooms_repo = InMemoryRoomRepository()
        attendance_repo = InMemoryAttendanceRepository()
    elif storage_backend == "mysql":
        if db_config is None:
            raise ValueError("db_config is required for the mysql backend")
        conn = DatabaseConnection(DBConfig.from_dict(db_config))
        users_repo = MySQLUserRepository(conn)
        rooms_repo = MySQLRoomRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
    else:
        raise ValueError(f"Unsupported storage backend: {storage_backend}")

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        rooms_repo,
        users_repo,
        clock=clock,
        strategy_factory=StatusStrategyFactory(),
        grace_minutes=grace_minutes,
    )
    analytics_service = AnalyticsService(attendance_repo)
    report_service = ReportService(attendance_repo, rooms_repo, users_repo)

    return Container(
        conn=conn,
        clock=clock,
        users_repo=users_repo,
        rooms_repo=rooms_repo,
        attendance_repo=attendance_repo,
        auth_service=auth_service,
        user_service=user_service,
        attendance_service=attendance_service,
        analytics_service=analytics_service,
        report_service=report_service,
    )
