"""Calendar windows used to scope aggregations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional

PERIODS = ("week", "month", "year")
DEFAULT_PERIOD = "month"

# Budget period names accepted wherever a period token is.
_ALIASES = {"weekly": "week", "monthly": "month", "yearly": "year"}

_END_OF_DAY = time(23, 59, 59, 999999)


@dataclass(frozen=True)
class PeriodWindow:
    """Inclusive ``[start, end]`` range of naive local datetimes."""

    period: str
    start: datetime
    end: datetime

    def __contains__(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def days(self) -> Iterator[date]:
        """Every calendar day in the window, in order."""
        day = self.start.date()
        while day <= self.end.date():
            yield day
            day += timedelta(days=1)


def normalize_period(period: Optional[str]) -> str:
    """Return ``week``, ``month`` or ``year``; anything else means ``month``.

    Budget period names (``weekly``, ``monthly``) map to their window.
    """

    token = (period or "").strip().lower()
    token = _ALIASES.get(token, token)
    return token if token in PERIODS else DEFAULT_PERIOD


def _month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    start = datetime(year, month, 1)
    if month == 12:
        next_start = datetime(year + 1, 1, 1)
    else:
        next_start = datetime(year, month + 1, 1)
    last_day = (next_start - timedelta(days=1)).date()
    return start, datetime.combine(last_day, _END_OF_DAY)


def _week_start(day: date) -> datetime:
    # Weeks run Sunday through Saturday.
    days_since_sunday = (day.weekday() + 1) % 7
    return datetime.combine(day - timedelta(days=days_since_sunday), time.min)


def period_window(period: Optional[str], now: datetime) -> PeriodWindow:
    """Window of the period containing ``now``."""

    token = normalize_period(period)
    if token == "week":
        start = _week_start(now.date())
        end = datetime.combine((start + timedelta(days=6)).date(), _END_OF_DAY)
    elif token == "year":
        start = datetime(now.year, 1, 1)
        end = datetime.combine(date(now.year, 12, 31), _END_OF_DAY)
    else:
        start, end = _month_bounds(now.year, now.month)
    return PeriodWindow(period=token, start=start, end=end)


def previous_period_window(period: Optional[str], now: datetime) -> PeriodWindow:
    """Window of the period immediately before the one containing ``now``."""

    token = normalize_period(period)
    if token == "week":
        start = _week_start(now.date()) - timedelta(days=7)
        end = datetime.combine((start + timedelta(days=6)).date(), _END_OF_DAY)
    elif token == "year":
        start = datetime(now.year - 1, 1, 1)
        end = datetime.combine(date(now.year - 1, 12, 31), _END_OF_DAY)
    elif now.month == 1:
        start, end = _month_bounds(now.year - 1, 12)
    else:
        start, end = _month_bounds(now.year, now.month - 1)
    return PeriodWindow(period=token, start=start, end=end)
