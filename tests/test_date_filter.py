"""
Inclusive date range handling.
"""
from datetime import date, datetime, timedelta

from kampagnenradar.services.date_filter import DateRange, filter_by_date

NOW = datetime(2026, 10, 18, 12, 0)


def test_empty_range_keeps_everything():
    items = [datetime(2000, 1, 1), None]
    assert filter_by_date(items, DateRange(), lambda d: d) == items
    assert filter_by_date(items, None, lambda d: d) == items


def test_date_only_bounds_cover_whole_days():
    r = DateRange(date_from=date(2026, 10, 1), date_to=date(2026, 10, 1))
    assert r.contains(datetime(2026, 10, 1, 0, 0), NOW)
    assert r.contains(datetime(2026, 10, 1, 23, 59, 59), NOW)
    assert not r.contains(datetime(2026, 10, 2, 0, 0), NOW)
    assert not r.contains(datetime(2026, 9, 30, 23, 59), NOW)


def test_open_end_runs_to_now():
    r = DateRange(date_from=date(2026, 10, 1))
    assert r.contains(NOW - timedelta(hours=1), NOW)
    assert not r.contains(NOW + timedelta(hours=1), NOW)


def test_open_start():
    r = DateRange(date_to=date(2026, 10, 1))
    assert r.contains(datetime(1999, 1, 1), NOW)
    assert not r.contains(datetime(2026, 10, 2), NOW)


def test_undated_values_match():
    r = DateRange(date_from=date(2026, 10, 1), date_to=date(2026, 10, 2))
    assert r.contains(None, NOW)


def test_previous_period_has_equal_length():
    r = DateRange(date_from=date(2026, 10, 1), date_to=date(2026, 10, 31))
    prev = r.previous_period(NOW)
    start, end = r.bounds(NOW)
    prev_start, prev_end = prev.bounds(NOW)
    assert prev_end < start
    assert prev_end - prev_start == end - start
    assert prev.contains(datetime(2026, 9, 15), NOW)
    assert not prev.contains(datetime(2026, 10, 1), NOW)


def test_previous_period_needs_a_start():
    assert DateRange(date_to=date(2026, 10, 1)).previous_period(NOW) is None
