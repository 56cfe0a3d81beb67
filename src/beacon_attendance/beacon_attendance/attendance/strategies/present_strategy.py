from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import StatusDecision, StatusStrategy


class PresentStrategy(StatusStrategy):
    """In range, on time (or no session timing known)."""

    def decide(self, *, now: datetime, session_start: Optional[datetime], grace_minutes: Optional[int]) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
