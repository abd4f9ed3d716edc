from datetime import date, datetime

from protocol.dates import days_elapsed, is_consecutive, is_same_day, to_date


def test_days_elapsed_is_at_least_one():
    assert days_elapsed(date(2026, 3, 10), date(2026, 3, 10)) == 1
    # start date in the future still counts as day 1
    assert days_elapsed(date(2026, 3, 12), date(2026, 3, 10)) == 1


def test_days_elapsed_with_dates_uses_whole_days():
    assert days_elapsed(date(2026, 3, 1), date(2026, 3, 8)) == 7


def test_days_elapsed_rounds_partial_days_up():
    start = date(2026, 3, 1)
    assert days_elapsed(start, datetime(2026, 3, 1, 15, 0)) == 1
    assert days_elapsed(start, datetime(2026, 3, 2, 0, 1)) == 2
    assert days_elapsed(start, datetime(2026, 3, 8, 9, 0)) == 8


def test_days_elapsed_accepts_iso_text():
    assert days_elapsed("2026-03-01", date(2026, 3, 4)) == 3


def test_is_consecutive():
    assert is_consecutive(date(2026, 3, 9), date(2026, 3, 10))
    assert not is_consecutive(date(2026, 3, 8), date(2026, 3, 10))
    assert not is_consecutive(date(2026, 3, 10), date(2026, 3, 10))
    assert not is_consecutive(None, date(2026, 3, 10))


def test_is_consecutive_across_month_and_year():
    assert is_consecutive(date(2026, 2, 28), date(2026, 3, 1))
    assert is_consecutive("2025-12-31", "2026-01-01")


def test_is_same_day_ignores_time_of_day():
    assert is_same_day(datetime(2026, 3, 10, 0, 1), datetime(2026, 3, 10, 23, 59))
    assert is_same_day(date(2026, 3, 10), "2026-03-10")
    assert not is_same_day(date(2026, 3, 10), date(2026, 3, 11))
    assert not is_same_day(None, date(2026, 3, 10))


def test_to_date():
    assert to_date("2026-03-10T08:00:00") == date(2026, 3, 10)
    assert to_date(datetime(2026, 3, 10, 8)) == date(2026, 3, 10)
    assert to_date(None) is None
