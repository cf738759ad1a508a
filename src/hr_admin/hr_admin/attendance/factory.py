from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, late_after: Optional[time], grace_minutes: int) -> AttendanceStrategy:
        if not late_after:
            return PresentStrategy()

        cutoff = datetime.combine(now.date(), late_after)
        if now <= cutoff + timedelta(minutes=grace_minutes):
            return PresentStrategy()
        return LateStrategy()
