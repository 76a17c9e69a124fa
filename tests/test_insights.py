"""Insight priority selection."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ledgerwise.services.insights import FALLBACK_INSIGHT, choose_insight, select_insight
from ledgerwise.services.reports import BudgetStatus, CategoryTotal, budget_state, round1


def _budget(name: str, spent: str, amount: str = "100", budget_id: int = 1) -> BudgetStatus:
    spent_d, amount_d = Decimal(spent), Decimal(amount)
    raw = spent_d / amount_d * 100
    return BudgetStatus(
        budget_id=budget_id,
        category_id=budget_id,
        category_name=name,
        period="monthly",
        amount=amount_d,
        spent=spent_d,
        remaining=max(Decimal("0"), amount_d - spent_d),
        percentage=round1(raw),
        status=budget_state(raw),
        raw_percentage=raw,
    )


TOP = CategoryTotal(
    category_id=3, name="Travel", emoji="✈️", total=Decimal("90"), count=2, percentage=100.0
)


def _choose(**overrides):
    params = {
        "period": "month",
        "budgets": [],
        "current_expense": Decimal("0"),
        "previous_expense": Decimal("0"),
        "top_category": None,
    }
    params.update(overrides)
    return choose_insight(**params)


def test_exceeded_budget_wins_over_everything():
    insight = _choose(
        budgets=[_budget("Food", "85"), _budget("Shopping", "112.5", budget_id=2)],
        current_expense=Decimal("500"),
        previous_expense=Decimal("100"),
        top_category=TOP,
    )
    assert insight.kind == "warning"
    assert insight.severity == "high"
    assert insight.message == "You've exceeded your Shopping budget by 13%"
    assert insight.icon == "⚠️"


def test_first_exceeded_budget_in_record_order():
    insight = _choose(budgets=[_budget("Food", "150"), _budget("Fuel", "300", budget_id=2)])
    assert insight.message == "You've exceeded your Food budget by 50%"


def test_warning_budget_names_usage():
    insight = _choose(budgets=[_budget("Food", "50"), _budget("Fuel", "84.6", budget_id=2)])
    assert insight.severity == "medium"
    assert insight.message == "You've used 85% of your Fuel budget"
    assert insight.icon == "📊"


def test_spending_up_and_down():
    up = _choose(current_expense=Decimal("150"), previous_expense=Decimal("100"))
    assert (up.kind, up.severity) == ("info", "medium")
    assert up.message == "Spending is up 50% compared to last month"

    down = _choose(period="week", current_expense=Decimal("60"), previous_expense=Decimal("100"))
    assert (down.kind, down.severity) == ("success", "low")
    assert down.message == "Great! Spending is down 40% from last week"


def test_small_change_falls_through_to_top_category():
    insight = _choose(current_expense=Decimal("110"), previous_expense=Decimal("100"), top_category=TOP)
    assert insight.message == "✈️ Travel is your top spending category"
    assert insight.icon == "💡"


def test_top_category_without_emoji_uses_money_bag():
    plain = CategoryTotal(category_id=4, name="Misc", emoji="", total=Decimal("1"), count=1, percentage=100.0)
    assert _choose(top_category=plain).message == "💰 Misc is your top spending category"


def test_fallback_when_nothing_qualifies():
    assert _choose() == FALLBACK_INSIGHT
    assert FALLBACK_INSIGHT.to_dict() == {
        "type": "info",
        "severity": "low",
        "message": "Keep tracking your expenses to see personalized insights",
        "icon": "💡",
    }


def test_select_insight_on_empty_ledger(ledger, user):
    assert select_insight(ledger, user_id=user.id) == FALLBACK_INSIGHT


def test_select_insight_compares_with_previous_month(ledger, user, entry_factory):
    entry_factory("expense", "100", occurred_on=datetime(2026, 2, 14, 12, 0))
    entry_factory("expense", "180", occurred_on=datetime(2026, 3, 3, 12, 0))

    insight = select_insight(ledger, user_id=user.id, period="month")
    assert insight.message == "Spending is up 80% compared to last month"


def test_select_insight_prefers_budget_alerts(ledger, user, entry_factory, food_id, budget_factory):
    budget_factory(food_id, "200", "monthly")
    entry_factory("expense", "170", occurred_on=datetime(2026, 3, 3, 12, 0))

    insight = select_insight(ledger, user_id=user.id)
    assert insight.message == "You've used 85% of your Food & Dining budget"


def test_select_insight_top_category_without_history(ledger, user, entry_factory):
    entry_factory("expense", "20", occurred_on=datetime(2026, 3, 3, 12, 0))
    insight = select_insight(ledger, user_id=user.id)
    assert insight.message == "🍔 Food & Dining is your top spending category"


def test_select_insight_measures_budgets_in_the_requested_period(
    ledger, user, entry_factory, food_id, budget_factory
):
    budget_factory(food_id, "100", "monthly")
    entry_factory("expense", "150", occurred_on=datetime(2026, 1, 10, 12, 0))

    assert select_insight(ledger, user_id=user.id, period="year").message == (
        "You've exceeded your Food & Dining budget by 50%"
    )
    assert select_insight(ledger, user_id=user.id, period="month") == FALLBACK_INSIGHT
