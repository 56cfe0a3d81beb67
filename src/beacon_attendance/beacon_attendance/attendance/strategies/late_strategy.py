from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import StatusDecision, StatusStrategy


class LateStrategy(StatusStrategy):
    """Mark arrived after the session start plus grace period."""

    def decide(self, *, now: datetime, session_start: Optional[datetime], grace_minutes: Optional[int]) -> StatusDecision:
        note = None
        if session_start is not None:
            late_minutes = int((now - session_start).total_seconds() // 60)
            note = f"{late_minutes} min after session start"
        return StatusDecision(status=AttendanceStatus.LATE, note=note)
