"""Budget targets: one per category and owner."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..errors import NotFoundError, ValidationError
from ..infra.repositories import SQLModelBudgetRepository, SQLModelCategoryRepository
from ..logging_config import get_logger
from ..models.budget import Budget
from ..schemas import BudgetSet, validate_payload

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

logger = get_logger("services.budgets")


def set_budget(
    ctx: "LedgerContext",
    *,
    user_id: int,
    category_id: int,
    amount: Any,
    period: str = "monthly",
) -> tuple[Budget, bool]:
    """Create or replace the budget for a category.

    Returns ``(budget, created)``.
    """

    payload = validate_payload(
        BudgetSet, {"category_id": category_id, "amount": amount, "period": period}
    )
    with ctx.unit_of_work() as session:
        category = SQLModelCategoryRepository(session).get_visible(
            payload.category_id, user_id=user_id
        )
        if category is None:
            raise NotFoundError("Category not found")
        if category.category_type != "expense":
            raise ValidationError("Budgets can only be set on expense categories")

        budgets = SQLModelBudgetRepository(session)
        budget = budgets.get_for_category(payload.category_id, user_id=user_id)
        created = budget is None
        if budget is None:
            budget = Budget(user_id=user_id, category_id=payload.category_id)
        budget.amount = payload.amount
        budget.period = payload.period
        budget = budgets.add(budget)

    logger.info(
        "Budget saved",
        extra={"budget_id": budget.id, "category_id": budget.category_id, "is_new": created},
    )
    return budget, created
