"""CSV export of ledger entries."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from decimal import Decimal
from typing import IO, TYPE_CHECKING, Iterable, Mapping, Optional

from ..infra.repositories import SQLModelAccountRepository, SQLModelCategoryRepository
from ..models.account import Account
from ..models.category import Category
from ..models.entry import LedgerEntry
from .entries import LedgerFilters, filtered_entries

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

HEADERS = ["Date", "Type", "Amount", "Category", "Description", "Division", "Account"]


def _serialize_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    return str(value)


def write_entries_csv(
    fh: IO[str],
    *,
    entries: Iterable[LedgerEntry],
    categories: Mapping[int, Category],
    accounts: Mapping[int, Account],
) -> int:
    """Write entries as CSV rows to an open text stream; returns the row count."""

    writer = csv.DictWriter(fh, fieldnames=HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL)
    writer.writeheader()
    count = 0
    for entry in entries:
        category = categories.get(entry.category_id)
        account: Optional[Account] = accounts.get(entry.account_id) if entry.account_id else None
        writer.writerow(
            {
                "Date": _serialize_value(entry.occurred_on),
                "Type": entry.kind,
                "Amount": _serialize_value(Decimal(entry.amount)),
                "Category": category.name if category else "",
                "Description": entry.description or "",
                "Division": entry.division,
                "Account": account.name if account else "",
            }
        )
        count += 1
    return count


def entries_csv_text(**kwargs) -> str:
    buffer = io.StringIO()
    write_entries_csv(buffer, **kwargs)
    return buffer.getvalue()


def export_for_filters(ctx: "LedgerContext", filters: LedgerFilters) -> str:
    """Render every live entry matching ``filters`` as CSV text, newest first."""

    with ctx.unit_of_work() as session:
        entries = filtered_entries(session, filters)
        categories = SQLModelCategoryRepository(session).lookup(e.category_id for e in entries)
        accounts = SQLModelAccountRepository(session).lookup(e.account_id for e in entries)

    return entries_csv_text(entries=entries, categories=categories, accounts=accounts)
