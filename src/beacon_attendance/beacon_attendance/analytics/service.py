from __future__ import annotations

from datetime import date

from ..attendance.repository import AttendanceRepository
from .model import RoomStats
from .stats import compute_stats


class AnalyticsService:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def compute_stats(self, room_id: str, day: date, total_enrolled: int) -> RoomStats:
        return compute_stats(self._attendance.by_room_and_day(room_id, day), total_enrolled)
