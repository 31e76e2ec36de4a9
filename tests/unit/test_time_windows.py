"""Tests for period window calculations.

Windows follow the local wall-clock calendar, so DST days and weeks have
the right length and consecutive windows never overlap or leave gaps.
"""

from datetime import date

import pytest

from minstd.core.models import Cadence, PeriodStartPreference
from minstd.core.time import parse_utc_iso8601_ms as ms
from minstd.core.validation import InvalidInputError
from minstd.periods.time_windows import (
    calculate_period_window,
    compute_day_window,
    compute_month_window,
    compute_week_window,
    get_week_start,
    next_period_window,
    previous_period_window,
)

DAILY = Cadence(1, "day")
WEEKLY = Cadence(1, "week")
MONTHLY = Cadence(1, "month")

HOUR_MS = 60 * 60 * 1000


def hours(window):
    return (window.end_ms - window.start_ms) / HOUR_MS


def test_get_week_start_monday():
    """Test getting week start (Monday)."""
    # Wednesday, Oct 8, 2025
    start = get_week_start(date(2025, 10, 8), start_on=1)

    assert start == date(2025, 10, 6)
    assert start.isoweekday() == 1


def test_get_week_start_sunday():
    """Test getting week start (Sunday)."""
    start = get_week_start(date(2025, 10, 8), start_on=7)

    assert start == date(2025, 10, 5)


def test_get_week_start_on_start_day_is_identity():
    assert get_week_start(date(2025, 12, 10), start_on=3) == date(2025, 12, 10)


def test_daily_window_mid_day():
    window = calculate_period_window(ms("2025-12-11T14:30:00Z"), DAILY, "UTC")

    assert window.start_ms == ms("2025-12-11T00:00:00Z")
    assert window.end_ms == ms("2025-12-12T00:00:00Z")
    assert window.period_key == "2025-12-11"
    assert window.label == "December 11, 2025"


def test_daily_boundary_at_end_of_day():
    before = calculate_period_window(ms("2025-12-11T23:59:59.999Z"), DAILY, "UTC")
    after = calculate_period_window(ms("2025-12-12T00:00:00Z"), DAILY, "UTC")

    assert before.period_key == "2025-12-11"
    assert after.period_key == "2025-12-12"
    assert before.end_ms == after.start_ms


def test_daily_window_in_other_timezone():
    window = calculate_period_window(ms("2025-12-11T14:30:00Z"), DAILY, "America/New_York")

    assert window.period_key == "2025-12-11"
    assert window.label == "December 11, 2025"
    assert window.start_ms == ms("2025-12-11T05:00:00Z")


def test_same_instant_differs_across_timezones():
    instant = ms("2025-12-11T05:00:00Z")

    assert calculate_period_window(instant, DAILY, "UTC").period_key == "2025-12-11"
    assert calculate_period_window(instant, DAILY, "America/Los_Angeles").period_key == "2025-12-10"


def test_weekly_window_default_monday_start():
    window = calculate_period_window(ms("2025-12-10T14:30:00Z"), WEEKLY, "UTC")

    assert window.start_ms == ms("2025-12-08T00:00:00Z")
    assert window.end_ms == ms("2025-12-15T00:00:00Z")
    assert window.period_key == "2025-12-08"
    # End is exclusive, so the label shows the day before
    assert window.label == "December 8, 2025 – December 14, 2025"


def test_weekly_sunday_to_monday_transition():
    sunday = calculate_period_window(ms("2025-12-14T23:00:00Z"), WEEKLY, "UTC")
    monday = calculate_period_window(ms("2025-12-15T01:00:00Z"), WEEKLY, "UTC")

    assert sunday.period_key != monday.period_key
    assert sunday.end_ms == monday.start_ms


def test_custom_week_start_wednesday():
    preference = PeriodStartPreference.week_day(3)

    tuesday = calculate_period_window(ms("2025-12-09T10:00:00Z"), WEEKLY, "UTC", preference)
    wednesday = calculate_period_window(ms("2025-12-10T10:00:00Z"), WEEKLY, "UTC", preference)

    assert tuesday.start_ms == ms("2025-12-03T00:00:00Z")
    assert tuesday.end_ms == ms("2025-12-10T00:00:00Z")
    assert wednesday.start_ms == ms("2025-12-10T00:00:00Z")
    assert wednesday.end_ms == ms("2025-12-17T00:00:00Z")


def test_week_preference_ignored_for_day_and_month():
    preference = PeriodStartPreference.week_day(3)
    instant = ms("2025-12-09T10:00:00Z")

    assert calculate_period_window(instant, DAILY, "UTC", preference) == calculate_period_window(
        instant, DAILY, "UTC"
    )
    assert calculate_period_window(instant, MONTHLY, "UTC", preference) == calculate_period_window(
        instant, MONTHLY, "UTC"
    )


def test_monthly_window():
    window = calculate_period_window(ms("2025-12-11T14:30:00Z"), MONTHLY, "UTC")

    assert window.start_ms == ms("2025-12-01T00:00:00Z")
    assert window.end_ms == ms("2026-01-01T00:00:00Z")
    assert window.period_key == "2025-12"
    assert window.label == "December 2025"


def test_monthly_year_boundary():
    december = calculate_period_window(ms("2025-12-31T23:59:59Z"), MONTHLY, "UTC")
    january = calculate_period_window(ms("2026-01-01T00:00:00Z"), MONTHLY, "UTC")

    assert december.period_key == "2025-12"
    assert january.period_key == "2026-01"
    assert december.end_ms == january.start_ms


def test_leap_february():
    window = calculate_period_window(ms("2028-02-29T12:00:00Z"), MONTHLY, "UTC")

    assert window.period_key == "2028-02"
    assert hours(window) == 29 * 24


def test_day_window_spring_forward():
    """DST spring forward day is 23 hours long."""
    window = compute_day_window(date(2025, 3, 9), "America/New_York")

    assert window.start_ms == ms("2025-03-09T05:00:00Z")
    assert window.end_ms == ms("2025-03-10T04:00:00Z")
    assert hours(window) == 23


def test_day_window_fall_back():
    """DST fall back day is 25 hours long."""
    window = compute_day_window(date(2025, 11, 2), "America/New_York")

    assert window.start_ms == ms("2025-11-02T04:00:00Z")
    assert window.end_ms == ms("2025-11-03T05:00:00Z")
    assert hours(window) == 25


def test_dst_day_keeps_key_across_transition():
    before = calculate_period_window(ms("2025-03-09T06:30:00Z"), DAILY, "America/New_York")
    after = calculate_period_window(ms("2025-03-09T07:30:00Z"), DAILY, "America/New_York")

    assert before.period_key == after.period_key == "2025-03-09"


def test_week_window_dst_spring():
    window = compute_week_window(date(2025, 3, 9), "America/New_York", start_on=7)

    assert window.period_key == "2025-03-09"
    assert hours(window) == 167


def test_week_window_dst_fall():
    window = compute_week_window(date(2025, 11, 2), "America/New_York", start_on=7)

    assert window.period_key == "2025-11-02"
    assert hours(window) == 169


def test_month_window_dst():
    assert hours(compute_month_window(date(2025, 3, 15), "America/New_York")) == 743
    assert hours(compute_month_window(date(2025, 11, 15), "America/New_York")) == 721


def test_month_window_positive_offset():
    window = compute_month_window(date(2025, 10, 8), "Europe/Brussels")

    assert window.start_ms == ms("2025-09-30T22:00:00Z")
    assert window.end_ms == ms("2025-10-31T23:00:00Z")


def test_nonexistent_midnight_starts_at_transition():
    """Clocks jumped from 00:00 to 01:00 in Sao Paulo on 2018-11-04."""
    window = compute_day_window(date(2018, 11, 4), "America/Sao_Paulo")
    previous = compute_day_window(date(2018, 11, 3), "America/Sao_Paulo")

    assert window.start_ms == ms("2018-11-04T03:00:00Z")
    assert previous.end_ms == window.start_ms
    assert hours(window) == 23


def test_utc_day_always_24_hours():
    assert hours(compute_day_window(date(2025, 3, 9), "UTC")) == 24


PARTITION_CASES = [
    ("UTC", DAILY, None, "2025-12-01T00:00:00Z"),
    ("America/New_York", DAILY, None, "2025-03-01T12:00:00Z"),
    ("America/New_York", DAILY, None, "2025-10-25T12:00:00Z"),
    ("Europe/Brussels", WEEKLY, None, "2025-03-01T12:00:00Z"),
    ("Australia/Lord_Howe", DAILY, None, "2025-04-01T12:00:00Z"),
    ("America/Sao_Paulo", DAILY, None, "2018-10-30T12:00:00Z"),
    ("Asia/Kolkata", WEEKLY, PeriodStartPreference.week_day(7), "2025-01-01T00:00:00Z"),
    ("Pacific/Auckland", WEEKLY, PeriodStartPreference.week_day(3), "2025-03-20T00:00:00Z"),
    ("America/Los_Angeles", MONTHLY, None, "2024-12-15T00:00:00Z"),
    ("Asia/Tokyo", MONTHLY, None, "2025-01-31T20:00:00Z"),
]


@pytest.mark.parametrize(("tz", "cadence", "preference", "start_iso"), PARTITION_CASES)
def test_windows_partition_local_time(tz, cadence, preference, start_iso):
    """Consecutive windows are contiguous, non-overlapping and increasing."""
    window = calculate_period_window(ms(start_iso), cadence, tz, preference)

    for _ in range(40):
        following = next_period_window(window, cadence, tz, preference)

        assert window.start_ms < window.end_ms
        assert window.end_ms == following.start_ms
        assert following.period_key != window.period_key
        # Every instant of a window maps back to that window
        assert calculate_period_window(window.start_ms, cadence, tz, preference) == window
        assert calculate_period_window(window.end_ms - 1, cadence, tz, preference) == window

        window = following


@pytest.mark.parametrize(("tz", "cadence", "preference", "start_iso"), PARTITION_CASES)
def test_previous_window_inverts_next(tz, cadence, preference, start_iso):
    window = calculate_period_window(ms(start_iso), cadence, tz, preference)
    following = next_period_window(window, cadence, tz, preference)

    assert previous_period_window(following, cadence, tz, preference) == window


def test_identical_inputs_yield_identical_windows():
    instant = ms("2025-11-02T05:30:00Z")
    preference = PeriodStartPreference.week_day(5)

    first = calculate_period_window(instant, WEEKLY, "America/New_York", preference)
    second = calculate_period_window(instant, WEEKLY, "America/New_York", preference)

    assert first == second
    assert first is not second


def test_interval_does_not_group_windows():
    instant = ms("2025-12-11T14:30:00Z")

    assert calculate_period_window(instant, Cadence(2, "day"), "UTC") == calculate_period_window(
        instant, DAILY, "UTC"
    )


@pytest.mark.parametrize("timestamp", [float("nan"), float("inf"), float("-inf"), "2025-12-11", None, True, 1e20])
def test_invalid_timestamp_raises(timestamp):
    with pytest.raises(InvalidInputError):
        calculate_period_window(timestamp, DAILY, "UTC")


@pytest.mark.parametrize(
    "instant,cadence,preference",
    [
        ("9999-12-15T00:00:00Z", MONTHLY, None),
        ("9999-12-29T00:00:00Z", WEEKLY, None),
        ("0001-01-02T00:00:00Z", WEEKLY, PeriodStartPreference.week_day(3)),
    ],
)
def test_timestamp_near_calendar_limits_raises(instant, cadence, preference):
    with pytest.raises(InvalidInputError, match="out of supported range"):
        calculate_period_window(ms(instant), cadence, "UTC", preference)


@pytest.mark.parametrize("instant", ["0001-03-01T00:00:00Z", "9999-11-01T00:00:00Z"])
@pytest.mark.parametrize("cadence", [DAILY, WEEKLY, MONTHLY])
@pytest.mark.parametrize("tz", ["UTC", "Pacific/Kiritimati", "Pacific/Pago_Pago", "America/New_York"])
@pytest.mark.parametrize("week_start_day", [3, 7])
def test_extreme_accepted_instants_have_windows(instant, cadence, tz, week_start_day):
    timestamp = ms(instant)

    window = calculate_period_window(timestamp, cadence, tz, PeriodStartPreference.week_day(week_start_day))

    assert window.start_ms <= timestamp < window.end_ms


@pytest.mark.parametrize("tz", ["Invalid/Timezone", "", "   ", None, "Mars/Olympus_Mons"])
def test_invalid_timezone_raises(tz):
    with pytest.raises(InvalidInputError, match="Invalid timezone"):
        calculate_period_window(ms("2025-12-11T14:30:00Z"), DAILY, tz)


@pytest.mark.parametrize(
    "cadence",
    [Cadence(1, "year"), Cadence(0, "day"), Cadence(-1, "week"), Cadence(1.5, "month"), Cadence(True, "day")],
)
def test_unsupported_cadence_raises(cadence):
    with pytest.raises(InvalidInputError, match="Unsupported cadence"):
        calculate_period_window(ms("2025-12-11T14:30:00Z"), cadence, "UTC")


@pytest.mark.parametrize("day", [0, 8, None, 2.5])
def test_invalid_week_start_day_raises(day):
    with pytest.raises(InvalidInputError, match="weekStartDay"):
        calculate_period_window(
            ms("2025-12-11T14:30:00Z"),
            WEEKLY,
            "UTC",
            PeriodStartPreference(mode="weekDay", week_start_day=day),
        )


def test_invalid_input_error_is_value_error():
    with pytest.raises(ValueError):
        calculate_period_window(float("nan"), DAILY, "UTC")
