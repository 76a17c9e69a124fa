"""Single prioritized spending insight."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Optional, Sequence

from .periods import normalize_period
from .reports import BudgetStatus, CategoryTotal, budget_status, category_breakdown, summarize

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

SPENDING_CHANGE_THRESHOLD = Decimal("20")


@dataclass(frozen=True)
class Insight:
    kind: str  # warning | info | success
    severity: str  # high | medium | low
    message: str
    icon: str

    def to_dict(self) -> dict[str, str]:
        data = asdict(self)
        data["type"] = data.pop("kind")
        return data


FALLBACK_INSIGHT = Insight(
    kind="info",
    severity="low",
    message="Keep tracking your expenses to see personalized insights",
    icon="💡",
)


def _whole_percent(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def choose_insight(
    *,
    period: str,
    budgets: Sequence[BudgetStatus],
    current_expense: Decimal,
    previous_expense: Decimal,
    top_category: Optional[CategoryTotal],
) -> Insight:
    """Pick the headline from precomputed figures; first rule that matches wins."""

    for budget in budgets:
        if budget.status == "exceeded":
            return Insight(
                kind="warning",
                severity="high",
                message=(
                    f"You've exceeded your {budget.category_name} budget by "
                    f"{budget.rounded_percentage - 100}%"
                ),
                icon="⚠️",
            )
    for budget in budgets:
        if budget.status == "warning":
            return Insight(
                kind="warning",
                severity="medium",
                message=f"You've used {budget.rounded_percentage}% of your {budget.category_name} budget",
                icon="📊",
            )

    if current_expense > 0 and previous_expense > 0:
        change = (current_expense - previous_expense) / previous_expense * 100
        if change > SPENDING_CHANGE_THRESHOLD:
            return Insight(
                kind="info",
                severity="medium",
                message=f"Spending is up {_whole_percent(change)}% compared to last {period}",
                icon="📈",
            )
        if change < -SPENDING_CHANGE_THRESHOLD:
            return Insight(
                kind="success",
                severity="low",
                message=f"Great! Spending is down {abs(_whole_percent(change))}% from last {period}",
                icon="🎉",
            )

    if top_category is not None:
        return Insight(
            kind="info",
            severity="low",
            message=f"{top_category.emoji or '💰'} {top_category.name} is your top spending category",
            icon="💡",
        )
    return FALLBACK_INSIGHT


def select_insight(
    ctx: "LedgerContext",
    *,
    user_id: int,
    period: Optional[str] = None,
    division: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Insight:
    """Compute the figures for ``period`` and return the one insight to surface."""

    now = now or ctx.clock.localnow()
    token = normalize_period(period)
    summary = summarize(ctx, user_id=user_id, period=token, division=division, now=now)
    breakdown = category_breakdown(
        ctx, user_id=user_id, period=token, kind="expense", division=division, now=now
    )
    return choose_insight(
        period=token,
        budgets=budget_status(ctx, user_id=user_id, period=token, now=now),
        current_expense=summary.expense,
        previous_expense=summary.previous_expense,
        top_category=breakdown.rows[0] if breakdown.rows else None,
    )
