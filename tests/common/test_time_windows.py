from datetime import date, datetime, timedelta, timezone

from src.attendance_tracker.attendance_tracker.common.time_windows import (
    as_date_range,
    calendar_day,
    day_bounds,
    month_bounds,
    trailing_days,
)

UTC = timezone.utc
PLUS_7 = timezone(timedelta(hours=7))


def test_day_bounds_cover_whole_day_to_the_millisecond():
    start, end = day_bounds(date(2026, 3, 15), UTC)

    assert start == datetime(2026, 3, 15, 0, 0, 0, 0, tzinfo=UTC)
    assert end == datetime(2026, 3, 15, 23, 59, 59, 999000, tzinfo=UTC)


def test_day_bounds_ignore_time_of_day_of_timestamp_input():
    start, end = day_bounds(datetime(2026, 3, 15, 17, 45, tzinfo=UTC), UTC)

    assert start.date() == end.date() == date(2026, 3, 15)


def test_month_bounds_handle_variable_lengths():
    assert month_bounds(2, 2024, UTC)[1].date() == date(2024, 2, 29)
    assert month_bounds(2, 2026, UTC)[1].date() == date(2026, 2, 28)
    assert month_bounds(4, 2026, UTC)[1].date() == date(2026, 4, 30)

    start, end = month_bounds(12, 2026, UTC)
    assert start == datetime(2026, 12, 1, tzinfo=UTC)
    assert end == datetime(2026, 12, 31, 23, 59, 59, 999000, tzinfo=UTC)


def test_month_zero_rolls_back_to_previous_december():
    start, end = month_bounds(0, 2026, UTC)

    assert start.date() == date(2025, 12, 1)
    assert end.date() == date(2025, 12, 31)


def test_month_thirteen_rolls_forward_to_january():
    start, end = month_bounds(13, 2025, UTC)

    assert (start.date(), end.date()) == (date(2026, 1, 1), date(2026, 1, 31))


def test_calendar_day_uses_configured_zone_across_midnight():
    late_evening_utc = datetime(2026, 3, 15, 20, 30, tzinfo=UTC)

    assert calendar_day(late_evening_utc, UTC) == date(2026, 3, 15)
    assert calendar_day(late_evening_utc, PLUS_7) == date(2026, 3, 16)


def test_calendar_day_treats_naive_timestamps_as_local():
    assert calendar_day(datetime(2026, 3, 15, 23, 59), PLUS_7) == date(2026, 3, 15)


def test_trailing_days_are_oldest_first_ending_today():
    days = trailing_days(date(2026, 3, 2))

    assert len(days) == 7
    assert days[0] == date(2026, 2, 24)
    assert days[-1] == date(2026, 3, 2)


def test_as_date_range_converts_bounds():
    assert as_date_range(month_bounds(1, 2026, UTC)) == (date(2026, 1, 1), date(2026, 1, 31))
