from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Protocol


class Clock(Protocol):
    """Source of "now" handed to services instead of reading system time."""

    @property
    def tz(self) -> tzinfo:
        raise NotImplementedError

    def now(self) -> datetime:
        raise NotImplementedError


@dataclass(frozen=True)
class SystemClock:
    tz: tzinfo

    def now(self) -> datetime:
        return datetime.now(self.tz)


@dataclass
class FixedClock:
    """Clock frozen at a given instant (tests, batch replays)."""

    current: datetime
    tz: tzinfo

    def now(self) -> datetime:
        if self.current.tzinfo is None:
            return self.current.replace(tzinfo=self.tz)
        return self.current.astimezone(self.tz)

    def set(self, value: datetime) -> None:
        self.current = value
