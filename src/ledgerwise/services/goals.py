"""Savings goal contributions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..errors import NotFoundError
from ..infra.repositories import SQLModelGoalRepository
from ..logging_config import get_logger
from ..models.goal import Goal
from ..schemas import GoalContribution, validate_payload

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

logger = get_logger("services.goals")


def contribute(ctx: "LedgerContext", goal_id: int, *, user_id: int, amount: Any) -> Goal:
    """Add ``amount`` to a goal; reaching the target marks it completed.

    Contributions do not touch account balances.
    """

    payload = validate_payload(GoalContribution, {"amount": amount})
    with ctx.unit_of_work() as session:
        goals = SQLModelGoalRepository(session)
        goal = goals.get_by_id(goal_id, user_id=user_id)
        if goal is None:
            raise NotFoundError("Goal not found")
        goal.current_amount = goal.current_amount + payload.amount
        if goal.current_amount >= goal.target_amount:
            goal.is_completed = True
        goal = goals.add(goal)

    logger.info(
        "Goal contribution recorded",
        extra={"goal_id": goal_id, "amount": str(payload.amount), "completed": goal.is_completed},
    )
    return goal
