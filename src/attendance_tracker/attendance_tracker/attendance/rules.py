"""Status derivation rules.

A check-in strictly after the cutoff wall-clock time is late; the check-out
only adds hours and never changes the status decided at check-in.
"""

from __future__ import annotations

from datetime import datetime, time
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from ..core.constants import DEFAULT_LATE_CUTOFF
from ..core.enums import AttendanceStatus

_SECONDS_PER_HOUR = Decimal(3600)
_TWO_PLACES = Decimal("0.01")


def round_hours(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def is_late(check_in_time: datetime, cutoff: time = DEFAULT_LATE_CUTOFF) -> bool:
    # Wall-clock time in the check-in's own zone; 09:00:00 sharp is on time.
    return check_in_time.time() > cutoff


def derive_on_check_in(check_in_time: datetime, cutoff: time = DEFAULT_LATE_CUTOFF) -> AttendanceStatus:
    return AttendanceStatus.LATE if is_late(check_in_time, cutoff) else AttendanceStatus.PRESENT


def derive_hours(check_in_time: Optional[datetime], check_out_time: Optional[datetime]) -> Decimal:
    """Elapsed hours rounded half-up to 2 places, 0 when either side is missing."""
    if check_in_time is None or check_out_time is None:
        return round_hours(Decimal(0))
    elapsed = check_out_time - check_in_time
    seconds = Decimal(elapsed.days * 86400 + elapsed.seconds) + Decimal(elapsed.microseconds) / Decimal(1_000_000)
    return round_hours(seconds / _SECONDS_PER_HOUR)
