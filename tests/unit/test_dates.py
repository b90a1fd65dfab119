"""Unit tests for loan window resolution"""

from datetime import date, datetime, timezone
from prestamos_gateway.domain.dates import resolve_window
from prestamos_gateway.domain.models import StartDatePolicy
from conftest import MEXICO_CITY, fixed_clock


def test_automatic_policy_starts_tomorrow():
    window = resolve_window(StartDatePolicy.automatic(), 15, clock=fixed_clock(2024, 1, 10), tz=MEXICO_CITY)

    assert window.start_date == date(2024, 1, 11)
    assert window.end_date == date(2024, 1, 25)
    assert window.is_historical is False


def test_automatic_policy_uses_reference_timezone():
    """01:00 UTC on Jan 11 is still Jan 10 in Mexico City"""
    utc_clock = lambda: datetime(2024, 1, 11, 1, 0, tzinfo=timezone.utc)

    window = resolve_window(StartDatePolicy.automatic(), 15, clock=utc_clock, tz=MEXICO_CITY)

    assert window.start_date == date(2024, 1, 11)


def test_explicit_policy_is_not_shifted():
    window = resolve_window(StartDatePolicy.on(date(2024, 3, 1)), 20, clock=fixed_clock(2024, 1, 10), tz=MEXICO_CITY)

    assert window.start_date == date(2024, 3, 1)
    assert window.end_date == date(2024, 3, 20)
    assert window.is_historical is False


def test_four_week_term_spans_28_days():
    window = resolve_window(StartDatePolicy.on(date(2024, 2, 1)), 28, clock=fixed_clock(2024, 1, 10), tz=MEXICO_CITY)

    assert window.end_date == date(2024, 2, 28)


def test_end_before_today_is_historical():
    window = resolve_window(StartDatePolicy.on(date(2023, 12, 1)), 15, clock=fixed_clock(2024, 1, 10), tz=MEXICO_CITY)

    assert window.end_date == date(2023, 12, 15)
    assert window.is_historical is True


def test_end_yesterday_is_historical():
    # 2023-12-26 + 14 days = 2024-01-09, the day before "today"
    window = resolve_window(StartDatePolicy.on(date(2023, 12, 26)), 15, clock=fixed_clock(2024, 1, 10), tz=MEXICO_CITY)

    assert window.end_date == date(2024, 1, 9)
    assert window.is_historical is True


def test_end_today_is_not_historical():
    window = resolve_window(StartDatePolicy.on(date(2023, 12, 27)), 15, clock=fixed_clock(2024, 1, 10), tz=MEXICO_CITY)

    assert window.end_date == date(2024, 1, 10)
    assert window.is_historical is False


def test_today_uses_start_of_day_not_time():
    """Late in the evening is still the same calendar day"""
    late = fixed_clock(2024, 1, 10, hour=23)
    window = resolve_window(StartDatePolicy.on(date(2023, 12, 27)), 15, clock=late, tz=MEXICO_CITY)

    assert window.is_historical is False


def test_resolve_window_is_repeatable():
    clock = fixed_clock(2024, 1, 10)
    policy = StartDatePolicy.automatic()

    assert resolve_window(policy, 23, clock=clock, tz=MEXICO_CITY) == resolve_window(policy, 23, clock=clock, tz=MEXICO_CITY)


def test_default_timezone_from_settings():
    """Without an explicit tz the configured reference timezone applies"""
    window = resolve_window(StartDatePolicy.automatic(), 15, clock=fixed_clock(2024, 1, 10))

    assert window.start_date == date(2024, 1, 11)
