from __future__ import annotations

from datetime import datetime

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def __init__(self, cutoff_label: str = "09:00"):
        self._cutoff_label = cutoff_label

    def decide_checkin(self, *, now: datetime) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.LATE,
            note=f"Checked in at {now.strftime('%H:%M:%S')}, after {self._cutoff_label}",
        )
