"""Ledger entry routes: listing, mutations, aggregates and export."""

from __future__ import annotations

from flask import Response, request

from ...extensions import current_user_id, get_ledger, success
from ...services import entries as entry_service
from ...services import reports
from ...services.export_csv import export_for_filters
from ..serializers import (
    category_total_to_dict,
    date_arg,
    entry_payload,
    entry_to_dict,
    int_arg,
    json_body,
    summary_to_dict,
    trend_point_to_dict,
    undo_deadline,
)
from . import bp

DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 100


def _filters(user_id: int) -> entry_service.LedgerFilters:
    return entry_service.LedgerFilters(
        user_id=user_id,
        start_date=date_arg("startDate"),
        end_date=date_arg("endDate", end_of_day=True),
        category_id=int_arg("category"),
        account_id=int_arg("account"),
        text=request.args.get("search") or None,
        kind=request.args.get("type", "all"),
        division=request.args.get("division"),
    )


@bp.get("")
def list_transactions():
    user_id = current_user_id()
    per_page = min(max(int_arg("limit", default=DEFAULT_PER_PAGE), 1), MAX_PER_PAGE)
    pagination = entry_service.Pagination(
        page=max(int_arg("page", default=1), 1),
        per_page=per_page,
        sort=request.args.get("sort", "-date"),
    )
    page = entry_service.list_entries(get_ledger(), _filters(user_id), pagination)
    return success(
        {
            "transactions": [entry_to_dict(row.entry, can_edit=row.can_edit) for row in page.rows],
            "pagination": {
                "page": page.page,
                "limit": page.per_page,
                "total": page.total,
                "pages": page.pages,
                "hasNext": page.has_next,
                "hasPrev": page.has_prev,
            },
        }
    )


@bp.post("")
def create_transaction():
    user_id = current_user_id()
    entry = entry_service.create_entry(get_ledger(), user_id=user_id, data=entry_payload(json_body()))
    return success({"transaction": entry_to_dict(entry, can_edit=True)}, 201)


@bp.put("/<int:entry_id>")
def update_transaction(entry_id: int):
    user_id = current_user_id()
    entry = entry_service.update_entry(
        get_ledger(), entry_id, user_id=user_id, changes=entry_payload(json_body())
    )
    return success({"transaction": entry_to_dict(entry)})


@bp.delete("/<int:entry_id>")
def delete_transaction(entry_id: int):
    user_id = current_user_id()
    ctx = get_ledger()
    entry = entry_service.delete_entry(ctx, entry_id, user_id=user_id)
    return success(
        {
            "message": (
                "Transaction deleted. You can undo this action within "
                f"{ctx.policy.undo_window.total_seconds():g} seconds."
            ),
            "transaction": entry_to_dict(entry),
            "undoExpiresAt": undo_deadline(entry, ctx.policy.undo_window),
        }
    )


@bp.patch("/<int:entry_id>/restore")
def restore_transaction(entry_id: int):
    user_id = current_user_id()
    entry = entry_service.restore_entry(get_ledger(), entry_id, user_id=user_id)
    return success({"message": "Transaction restored", "transaction": entry_to_dict(entry)})


@bp.get("/summary")
def summary():
    user_id = current_user_id()
    result = reports.summarize(
        get_ledger(),
        user_id=user_id,
        period=request.args.get("period"),
        division=request.args.get("division"),
    )
    return success(summary_to_dict(result))


@bp.get("/category-breakdown")
def category_breakdown():
    user_id = current_user_id()
    result = reports.category_breakdown(
        get_ledger(),
        user_id=user_id,
        period=request.args.get("period"),
        kind=request.args.get("type", "expense"),
        division=request.args.get("division"),
    )
    return success(
        {
            "breakdown": [category_total_to_dict(row) for row in result.rows],
            "total": float(result.total),
            "period": result.period,
        }
    )


@bp.get("/trend")
def trend():
    user_id = current_user_id()
    period = reports.normalize_period(request.args.get("period"))
    points = reports.daily_trend(
        get_ledger(), user_id=user_id, period=period, division=request.args.get("division")
    )
    return success({"trend": [trend_point_to_dict(p) for p in points], "period": period})


@bp.get("/export")
def export_transactions():
    user_id = current_user_id()
    ctx = get_ledger()
    body = export_for_filters(ctx, _filters(user_id))
    filename = f"transactions_{ctx.clock.localnow():%Y-%m-%d}.csv"
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
