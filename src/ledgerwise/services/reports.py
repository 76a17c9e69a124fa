"""Read-only period aggregates over live ledger entries.

Transfers never count as income or expense here; soft-deleted entries are
invisible. Every function only reads, so repeated calls with the same inputs
and no intervening writes return equal results.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Iterable, Optional

from sqlmodel import Session

from ..infra.repositories import (
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelEntryRepository,
)
from ..models.entry import LedgerEntry
from .periods import PeriodWindow, normalize_period, period_window, previous_period_window

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

ZERO = Decimal("0")
WARNING_THRESHOLD = 80
EXCEEDED_THRESHOLD = 100


def round1(value: Decimal) -> float:
    """Round to one decimal place, half-up, as a float for presentation."""

    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def percent_change(current: Decimal, previous: Decimal) -> float:
    """Change of ``current`` relative to ``previous``; 0 when there is no base."""

    if previous <= 0:
        return 0.0
    return round1((current - previous) / previous * 100)


def _division_filter(division: Optional[str]) -> Optional[str]:
    return None if division in (None, "", "all") else division


def _fetch(
    session: Session,
    *,
    user_id: int,
    window: PeriodWindow,
    kinds: Iterable[str] = ("income", "expense"),
    division: Optional[str] = None,
    category_id: Optional[int] = None,
) -> list[LedgerEntry]:
    return SQLModelEntryRepository(session).search(
        user_id=user_id,
        start_date=window.start,
        end_date=window.end,
        kinds=list(kinds),
        division=_division_filter(division),
        category_id=category_id,
    )


def _totals(entries: Iterable[LedgerEntry]) -> tuple[Decimal, Decimal]:
    income = expense = ZERO
    for entry in entries:
        if entry.kind == "income":
            income += Decimal(entry.amount)
        elif entry.kind == "expense":
            expense += Decimal(entry.amount)
    return income, expense


@dataclass(frozen=True)
class PeriodSummary:
    period: str
    income: Decimal
    expense: Decimal
    balance: Decimal
    savings_rate: float
    income_trend: float
    expense_trend: float
    start: datetime
    end: datetime
    previous_income: Decimal = ZERO
    previous_expense: Decimal = ZERO


def summarize(
    ctx: "LedgerContext",
    *,
    user_id: int,
    period: Optional[str] = None,
    division: Optional[str] = None,
    now: Optional[datetime] = None,
) -> PeriodSummary:
    """Income, expense, balance and savings rate with trends vs the previous period."""

    now = now or ctx.clock.localnow()
    window = period_window(period, now)
    previous = previous_period_window(period, now)
    with ctx.unit_of_work() as session:
        income, expense = _totals(_fetch(session, user_id=user_id, window=window, division=division))
        prev_income, prev_expense = _totals(
            _fetch(session, user_id=user_id, window=previous, division=division)
        )

    savings_rate = round1((income - expense) / income * 100) if income > 0 else 0.0
    return PeriodSummary(
        period=window.period,
        income=income,
        expense=expense,
        balance=income - expense,
        savings_rate=savings_rate,
        income_trend=percent_change(income, prev_income),
        expense_trend=percent_change(expense, prev_expense),
        start=window.start,
        end=window.end,
        previous_income=prev_income,
        previous_expense=prev_expense,
    )


@dataclass(frozen=True)
class CategoryTotal:
    category_id: int
    name: str
    emoji: str
    total: Decimal
    count: int
    percentage: float


@dataclass(frozen=True)
class CategoryBreakdown:
    period: str
    kind: str
    rows: list[CategoryTotal]
    total: Decimal


def category_breakdown(
    ctx: "LedgerContext",
    *,
    user_id: int,
    period: Optional[str] = None,
    kind: str = "expense",
    division: Optional[str] = None,
    now: Optional[datetime] = None,
) -> CategoryBreakdown:
    """Per-category totals in the window, largest first, with share of the grand total."""

    kind = kind if kind in ("income", "expense") else "expense"
    window = period_window(period, now or ctx.clock.localnow())
    with ctx.unit_of_work() as session:
        entries = _fetch(session, user_id=user_id, window=window, kinds=[kind], division=division)
        totals: dict[int, Decimal] = defaultdict(lambda: ZERO)
        counts: dict[int, int] = defaultdict(int)
        for entry in entries:
            totals[entry.category_id] += Decimal(entry.amount)
            counts[entry.category_id] += 1
        categories = SQLModelCategoryRepository(session).lookup(totals)

    grand_total = sum(totals.values(), ZERO)
    rows = []
    for category_id, total in totals.items():
        category = categories.get(category_id)
        rows.append(
            CategoryTotal(
                category_id=category_id,
                name=category.name if category else "Uncategorized",
                emoji=category.emoji if category else "",
                total=total,
                count=counts[category_id],
                percentage=round1(total / grand_total * 100) if grand_total > 0 else 0.0,
            )
        )
    rows.sort(key=lambda row: (-row.total, row.category_id))
    return CategoryBreakdown(period=window.period, kind=kind, rows=rows, total=grand_total)


@dataclass(frozen=True)
class TrendPoint:
    day: date
    income: Decimal
    expense: Decimal

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


def daily_trend(
    ctx: "LedgerContext",
    *,
    user_id: int,
    period: Optional[str] = None,
    division: Optional[str] = None,
    now: Optional[datetime] = None,
) -> list[TrendPoint]:
    """One point per calendar day in the window; days without activity are zero."""

    window = period_window(period, now or ctx.clock.localnow())
    with ctx.unit_of_work() as session:
        entries = _fetch(session, user_id=user_id, window=window, division=division)

    by_day: dict[date, list[LedgerEntry]] = defaultdict(list)
    for entry in entries:
        by_day[entry.occurred_on.date()].append(entry)

    points = []
    for day in window.days():
        income, expense = _totals(by_day.get(day, ()))
        points.append(TrendPoint(day=day, income=income, expense=expense))
    return points


@dataclass(frozen=True)
class BudgetStatus:
    budget_id: int
    category_id: int
    category_name: str
    period: str
    amount: Decimal
    spent: Decimal
    remaining: Decimal
    percentage: float
    status: str
    raw_percentage: Decimal

    @property
    def rounded_percentage(self) -> int:
        """Whole-number usage, half-up, as shown in headline messages."""
        return int(self.raw_percentage.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def budget_state(raw_percentage: Decimal) -> str:
    if raw_percentage >= EXCEEDED_THRESHOLD:
        return "exceeded"
    if raw_percentage >= WARNING_THRESHOLD:
        return "warning"
    return "normal"


def budget_status(
    ctx: "LedgerContext",
    *,
    user_id: int,
    period: Optional[str] = None,
    now: Optional[datetime] = None,
) -> list[BudgetStatus]:
    """Utilization of every budget, in record order, within the period window.

    Spending is summed over the window derived from ``period`` (budget names
    such as ``weekly`` are accepted), defaulting to the current month.
    """

    now = now or ctx.clock.localnow()
    window = period_window(period, now)
    results = []
    with ctx.unit_of_work() as session:
        budgets = SQLModelBudgetRepository(session).list_all(user_id=user_id)
        categories = SQLModelCategoryRepository(session).lookup(b.category_id for b in budgets)
        for budget in budgets:
            spent = sum(
                (
                    Decimal(e.amount)
                    for e in _fetch(
                        session,
                        user_id=user_id,
                        window=window,
                        kinds=["expense"],
                        category_id=budget.category_id,
                    )
                ),
                ZERO,
            )
            target = Decimal(budget.amount)
            raw = spent / target * 100 if target > 0 else ZERO
            category = categories.get(budget.category_id)
            results.append(
                BudgetStatus(
                    budget_id=budget.id,
                    category_id=budget.category_id,
                    category_name=category.name if category else "Uncategorized",
                    period=budget.period,
                    amount=target,
                    spent=spent,
                    remaining=max(ZERO, target - spent),
                    percentage=round1(raw),
                    status=budget_state(raw),
                    raw_percentage=raw,
                )
            )
    return results


__all__ = [
    "BudgetStatus",
    "CategoryBreakdown",
    "CategoryTotal",
    "PeriodSummary",
    "TrendPoint",
    "budget_state",
    "budget_status",
    "category_breakdown",
    "daily_trend",
    "normalize_period",
    "percent_change",
    "round1",
    "summarize",
]
