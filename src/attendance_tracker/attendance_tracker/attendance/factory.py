from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time

from ..core.constants import DEFAULT_LATE_CUTOFF
from .rules import is_late
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose the check-in strategy for a given instant."""

    cutoff: time = field(default=DEFAULT_LATE_CUTOFF)

    def for_checkin(self, *, now: datetime) -> AttendanceStrategy:
        if is_late(now, self.cutoff):
            return LateStrategy(self.cutoff.strftime("%H:%M"))
        return OnTimeStrategy()
