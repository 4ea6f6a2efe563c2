"""Calendar window arithmetic used to scope queries.

All functions are pure: they never read the clock and only depend on the
zone they are handed.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Tuple

from ..core.constants import DEFAULT_TREND_DAYS

Bounds = Tuple[datetime, datetime]

DAY_START = time(0, 0, 0, 0)
DAY_END = time(23, 59, 59, 999000)


def day_bounds(day: date, tz: tzinfo) -> Bounds:
    """Return ``day`` 00:00:00.000 and 23:59:59.999 in ``tz``."""
    if isinstance(day, datetime):
        day = calendar_day(day, tz)
    return (
        datetime.combine(day, DAY_START, tzinfo=tz),
        datetime.combine(day, DAY_END, tzinfo=tz),
    )


def month_bounds(month: int, year: int, tz: tzinfo) -> Bounds:
    """First instant and last millisecond of a month.

    ``month`` is not range-checked: 0 is December of the previous year and
    13 is January of the next one, like plain calendar arithmetic.
    """
    y, m = divmod(int(year) * 12 + int(month) - 1, 12)
    m += 1
    last_day = calendar.monthrange(y, m)[1]
    start = datetime.combine(date(y, m, 1), DAY_START, tzinfo=tz)
    end = datetime.combine(date(y, m, last_day), DAY_END, tzinfo=tz)
    return start, end


def calendar_day(ts: datetime, tz: tzinfo) -> date:
    """Calendar day an instant belongs to in ``tz``.

    Naive timestamps are taken as wall-clock time in ``tz`` already.
    """
    if ts.tzinfo is None:
        return ts.date()
    return ts.astimezone(tz).date()


def trailing_days(today: date, count: int = DEFAULT_TREND_DAYS) -> list[date]:
    """``count`` consecutive days, oldest first, ending at ``today``."""
    return [today - timedelta(days=offset) for offset in range(count - 1, -1, -1)]


def as_date_range(bounds: Bounds) -> tuple[date, date]:
    start, end = bounds
    return start.date(), end.date()
