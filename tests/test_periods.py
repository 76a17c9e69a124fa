"""Calendar window derivation."""

from __future__ import annotations

from datetime import datetime

import pytest

from ledgerwise.services.periods import (
    normalize_period,
    period_window,
    previous_period_window,
)

END_OF_DAY = (23, 59, 59, 999999)


def _end(year, month, day):
    return datetime(year, month, day, *END_OF_DAY)


def test_week_starts_on_sunday():
    window = period_window("week", datetime(2026, 3, 18, 10, 0))
    assert window.start == datetime(2026, 3, 15)
    assert window.end == _end(2026, 3, 21)


def test_week_containing_a_sunday_starts_that_day():
    window = period_window("week", datetime(2026, 3, 15, 0, 0, 1))
    assert window.start == datetime(2026, 3, 15)


def test_saturday_belongs_to_the_preceding_sunday():
    window = period_window("week", datetime(2026, 3, 21, 23, 0))
    assert window.start == datetime(2026, 3, 15)


def test_month_window_and_february():
    assert period_window("month", datetime(2026, 2, 10)).end == _end(2026, 2, 28)
    assert period_window("month", datetime(2028, 2, 10)).end == _end(2028, 2, 29)
    december = period_window("month", datetime(2026, 12, 31, 23, 0))
    assert december.start == datetime(2026, 12, 1)
    assert december.end == _end(2026, 12, 31)


def test_year_window():
    window = period_window("year", datetime(2026, 7, 4))
    assert window.start == datetime(2026, 1, 1)
    assert window.end == _end(2026, 12, 31)


def test_previous_month_rolls_over_january():
    window = previous_period_window("month", datetime(2026, 1, 10))
    assert window.start == datetime(2025, 12, 1)
    assert window.end == _end(2025, 12, 31)


def test_previous_week_and_year():
    week = previous_period_window("week", datetime(2026, 3, 18))
    assert week.start == datetime(2026, 3, 8)
    assert week.end == _end(2026, 3, 14)

    year = previous_period_window("year", datetime(2026, 3, 18))
    assert year.start == datetime(2025, 1, 1)


@pytest.mark.parametrize("token", [None, "", "quarter", "MONTH"])
def test_unknown_tokens_fall_back_to_month(token):
    assert normalize_period(token) == "month"
    assert period_window(token, datetime(2026, 3, 18)).start == datetime(2026, 3, 1)


@pytest.mark.parametrize(
    "token, expected", [("weekly", "week"), ("monthly", "month"), ("Yearly", "year"), ("week", "week")]
)
def test_budget_period_names_are_accepted(token, expected):
    assert normalize_period(token) == expected


def test_window_days_cover_every_date():
    days = list(period_window("month", datetime(2026, 3, 18)).days())
    assert len(days) == 31
    assert days[0].isoformat() == "2026-03-01"
    assert days[-1].isoformat() == "2026-03-31"
