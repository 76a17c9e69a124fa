"""JSON shapes and request parsing shared by the API blueprints."""

from __future__ import annotations

from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Mapping, Optional

from flask import request

from ..errors import ValidationError
from ..models import Account, Budget, Goal, LedgerEntry
from ..schemas import coerce_datetime
from ..services.reports import BudgetStatus, CategoryTotal, PeriodSummary, TrendPoint

# camelCase request keys to service field names
_ENTRY_FIELDS = {
    "type": "kind",
    "kind": "kind",
    "amount": "amount",
    "categoryId": "category_id",
    "description": "description",
    "date": "occurred_on",
    "division": "division",
    "accountId": "account_id",
}
_ACCOUNT_FIELDS = {"name": "name", "type": "account_type", "balance": "balance"}


def money(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def stamp(value: Optional[datetime]) -> Optional[str]:
    return None if value is None else value.isoformat()


def json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def _rename(body: Mapping[str, Any], fields: Mapping[str, str]) -> dict[str, Any]:
    return {fields[key]: value for key, value in body.items() if key in fields}


def entry_payload(body: Mapping[str, Any]) -> dict[str, Any]:
    return _rename(body, _ENTRY_FIELDS)


def account_payload(body: Mapping[str, Any]) -> dict[str, Any]:
    return _rename(body, _ACCOUNT_FIELDS)


def int_arg(name: str, *, default: Optional[int] = None) -> Optional[int]:
    raw = request.args.get(name, "").strip()
    if not raw or raw.lower() == "all":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer") from None


def date_arg(name: str, *, end_of_day: bool = False) -> Optional[datetime]:
    """Parse a date query argument; a bare ``YYYY-MM-DD`` end date covers the whole day."""

    raw = request.args.get(name, "").strip()
    if not raw:
        return None
    try:
        value = coerce_datetime(raw)
    except ValueError as exc:
        raise ValidationError(str(exc)) from None
    if end_of_day and len(raw) == 10:
        value = datetime.combine(value.date(), time.max)
    return value


def entry_to_dict(entry: LedgerEntry, *, can_edit: Optional[bool] = None) -> dict[str, Any]:
    data = {
        "id": entry.id,
        "type": entry.kind,
        "amount": money(entry.amount),
        "categoryId": entry.category_id,
        "description": entry.description,
        "date": stamp(entry.occurred_on),
        "division": entry.division,
        "accountId": entry.account_id,
        "linkedTransactionId": entry.linked_entry_id,
        "transferLeg": entry.transfer_leg,
        "isDeleted": entry.is_deleted,
        "deletedAt": stamp(entry.deleted_at),
        "createdAt": stamp(entry.created_at),
        "updatedAt": stamp(entry.updated_at),
    }
    if can_edit is not None:
        data["canEdit"] = can_edit
    return data


def account_to_dict(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "type": account.account_type,
        "balance": money(account.balance),
        "isDeleted": account.is_deleted,
        "createdAt": stamp(account.created_at),
    }


def budget_to_dict(budget: Budget) -> dict[str, Any]:
    return {
        "id": budget.id,
        "categoryId": budget.category_id,
        "amount": money(budget.amount),
        "period": budget.period,
    }


def budget_status_to_dict(status: BudgetStatus) -> dict[str, Any]:
    return {
        "id": status.budget_id,
        "categoryId": status.category_id,
        "categoryName": status.category_name,
        "period": status.period,
        "amount": money(status.amount),
        "spent": money(status.spent),
        "remaining": money(status.remaining),
        "percentage": status.percentage,
        "status": status.status,
    }


def goal_to_dict(goal: Goal, *, now: datetime) -> dict[str, Any]:
    return {
        "id": goal.id,
        "name": goal.name,
        "targetAmount": money(goal.target_amount),
        "currentAmount": money(goal.current_amount),
        "targetDate": goal.target_date.isoformat(),
        "isCompleted": goal.is_completed,
        "progress": goal.progress,
        "remainingAmount": money(goal.remaining_amount),
        "daysRemaining": goal.days_remaining(today=now.date()),
    }


def summary_to_dict(summary: PeriodSummary) -> dict[str, Any]:
    return {
        "income": money(summary.income),
        "expense": money(summary.expense),
        "balance": money(summary.balance),
        "savingsRate": summary.savings_rate,
        "trends": {"income": summary.income_trend, "expense": summary.expense_trend},
        "period": summary.period,
        "dateRange": {"startDate": stamp(summary.start), "endDate": stamp(summary.end)},
    }


def category_total_to_dict(row: CategoryTotal) -> dict[str, Any]:
    return {
        "categoryId": row.category_id,
        "name": row.name,
        "emoji": row.emoji,
        "total": money(row.total),
        "count": row.count,
        "percentage": row.percentage,
    }


def trend_point_to_dict(point: TrendPoint) -> dict[str, Any]:
    return {
        "date": point.day.isoformat(),
        "income": money(point.income),
        "expense": money(point.expense),
        "net": money(point.net),
    }


def undo_deadline(entry: LedgerEntry, window: timedelta) -> Optional[str]:
    if entry.deleted_at is None:
        return None
    return stamp(entry.deleted_at + window)
