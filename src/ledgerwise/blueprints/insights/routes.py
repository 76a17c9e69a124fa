"""Insight route."""

from __future__ import annotations

from flask import request

from ...extensions import current_user_id, get_ledger, success
from ...services.insights import select_insight
from ...services.periods import normalize_period
from . import bp


@bp.get("")
def get_insight():
    user_id = current_user_id()
    period = normalize_period(request.args.get("period"))
    division = request.args.get("division") or "all"
    insight = select_insight(get_ledger(), user_id=user_id, period=period, division=division)
    return success({"insight": insight.to_dict(), "period": period, "division": division})
