from __future__ import annotations

from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus
from .model import RoomStats


def rate_percent(attended: int, total: int) -> int:
    """100 * attended / total rounded half-up; 0 when total is 0."""
    if total <= 0:
        return 0
    return (200 * attended + total) // (2 * total)


def compute_stats(records: Iterable[AttendanceRecord], total_enrolled: int) -> RoomStats:
    """Pure aggregation over one room-day's records.

    Only valid records count. ``total_enrolled`` is the roster size supplied
    by the caller, so absent is clamped at zero when more marks than seats exist.
    """
    total_enrolled = max(int(total_enrolled), 0)
    present = 0
    late = 0
    for r in records:
        if not r.is_valid:
            continue
        if r.status == AttendanceStatus.PRESENT:
            present += 1
        elif r.status == AttendanceStatus.LATE:
            late += 1

    return RoomStats(
        present=present,
        late=late,
        absent=max(total_enrolled - present - late, 0),
        total=total_enrolled,
        attendance_rate_percent=rate_percent(present + late, total_enrolled),
    )


def combine_stats(stats: Iterable[RoomStats]) -> RoomStats:
    """Sum several day stats into one range summary (rate recomputed from the sums)."""
    present = late = absent = total = 0
    for s in stats:
        present += s.present
        late += s.late
        absent += s.absent
        total += s.total
    return RoomStats(
        present=present,
        late=late,
        absent=absent,
        total=total,
        attendance_rate_percent=rate_percent(present + late, total),
    )
