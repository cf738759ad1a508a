from __future__ import annotations

from datetime import datetime, time
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Check-in after the configured cut-off."""

    def decide_checkin(self, *, now: datetime, late_after: Optional[time], grace_minutes: int) -> StatusDecision:
        minutes_late = 0
        if late_after:
            cutoff = datetime.combine(now.date(), late_after)
            minutes_late = max(int((now - cutoff).total_seconds() // 60), 0)
        return StatusDecision(status=AttendanceStatus.LATE, minutes_late=minutes_late)
