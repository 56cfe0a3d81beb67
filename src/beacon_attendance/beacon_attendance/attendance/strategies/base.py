from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class StatusStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide the status of an accepted mark."""

    @abstractmethod
    def decide(self, *, now: datetime, session_start: Optional[datetime], grace_minutes: Optional[int]) -> StatusDecision:
        raise NotImplementedError
