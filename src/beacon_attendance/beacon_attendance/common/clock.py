from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .datetime_utils import now_local


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Server reference clock (local time)."""

    def now(self) -> datetime:
        return now_local()


class FixedClock:
    """Clock pinned to a given instant; ``set`` / ``advance`` move it."""

    def __init__(self, moment: datetime):
        self._moment = moment

    def now(self) -> datetime:
        return self._moment

    def set(self, moment: datetime) -> None:
        self._moment = moment

    def advance(self, delta: timedelta) -> None:
        self._moment += delta
