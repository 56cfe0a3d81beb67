from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from .strategies.base import StatusStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class StatusStrategyFactory:
    """Factory Pattern: choose the status strategy for an accepted mark.

    Without both a session start and a grace period every mark is present;
    no default lateness threshold exists.
    """

    def for_mark(
        self,
        *,
        now: datetime,
        session_start: Optional[datetime] = None,
        grace_minutes: Optional[int] = None,
    ) -> StatusStrategy:
        if session_start is None or grace_minutes is None:
            return PresentStrategy()

        if now <= session_start + timedelta(minutes=int(grace_minutes)):
            return PresentStrategy()
        return LateStrategy()
