"""Goal contribution route."""

from __future__ import annotations

from ...extensions import current_user_id, get_ledger, success
from ...services.goals import contribute
from ..serializers import goal_to_dict, json_body
from . import bp


@bp.post("/<int:goal_id>/add")
def add_to_goal(goal_id: int):
    user_id = current_user_id()
    ctx = get_ledger()
    goal = contribute(ctx, goal_id, user_id=user_id, amount=json_body().get("amount"))
    return success({"goal": goal_to_dict(goal, now=ctx.clock.localnow())})
