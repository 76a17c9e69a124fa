"""Budget routes: utilization status and upsert."""

from __future__ import annotations

from flask import request

from ...extensions import current_user_id, get_ledger, success
from ...services.budgets import set_budget
from ...services.periods import normalize_period
from ...services.reports import budget_status
from ..serializers import budget_status_to_dict, budget_to_dict, json_body
from . import bp


@bp.get("")
def list_budgets():
    period = normalize_period(request.args.get("period"))
    statuses = budget_status(get_ledger(), user_id=current_user_id(), period=period)
    return success({"budgets": [budget_status_to_dict(s) for s in statuses], "period": period})


@bp.post("")
def save_budget():
    user_id = current_user_id()
    body = json_body()
    budget, created = set_budget(
        get_ledger(),
        user_id=user_id,
        category_id=body.get("categoryId"),
        amount=body.get("amount"),
        period=body.get("period", "monthly"),
    )
    return success({"budget": budget_to_dict(budget)}, 201 if created else 200)
