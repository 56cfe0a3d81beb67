from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RoomStats:
    """Present/late/absent counts for a room over one day (or a summed range)."""

    present: int
    late: int
    absent: int
    total: int
    attendance_rate_percent: int

    def to_dict(self) -> dict:
        return {
            "present": self.present,
            "late": self.late,
            "absent": self.absent,
            "total": self.total,
            "attendanceRatePercent": self.attendance_rate_percent,
            "attendanceRate": f"{self.attendance_rate_percent}%",
        }
