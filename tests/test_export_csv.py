"""CSV export of entries."""

from __future__ import annotations

import csv
import io
from datetime import datetime

from ledgerwise.services.entries import LedgerFilters, delete_entry
from ledgerwise.services.export_csv import HEADERS, export_for_filters
from ledgerwise.services.transfers import transfer


def _rows(text: str) -> list[dict[str, str]]:
    return list(csv.DictReader(io.StringIO(text)))


def test_export_has_deterministic_columns(ledger, user, cash_id, bank_id, entry_factory):
    entry_factory(
        "expense", "12.5", account_id=cash_id, description="Coffee, beans", occurred_on=datetime(2026, 3, 2, 8)
    )
    entry_factory("income", "1000", occurred_on=datetime(2026, 3, 1, 9))
    transfer(
        ledger,
        user_id=user.id,
        from_account_id=cash_id,
        to_account_id=bank_id,
        amount="20",
        occurred_on=datetime(2026, 3, 3, 9),
    )

    text = export_for_filters(ledger, LedgerFilters(user_id=user.id))
    assert text.splitlines()[0] == ",".join(HEADERS)

    rows = _rows(text)
    assert len(rows) == 4
    coffee = next(row for row in rows if row["Description"] == "Coffee, beans")
    assert coffee == {
        "Date": "2026-03-02",
        "Type": "expense",
        "Amount": "12.50",
        "Category": "Food & Dining",
        "Description": "Coffee, beans",
        "Division": "personal",
        "Account": "Cash",
    }
    salary = next(row for row in rows if row["Type"] == "income")
    assert salary["Account"] == ""
    assert {row["Category"] for row in rows if row["Type"] == "transfer"} == {"Transfer"}


def test_export_respects_filters_and_deletions(ledger, user, entry_factory):
    keep = entry_factory("expense", "5", division="office")
    gone = entry_factory("expense", "6", division="office")
    entry_factory("income", "7")
    delete_entry(ledger, gone.id, user_id=user.id)

    rows = _rows(export_for_filters(ledger, LedgerFilters(user_id=user.id, division="office")))
    assert [row["Amount"] for row in rows] == [f"{keep.amount:.2f}"]


def test_export_of_empty_ledger_is_header_only(ledger, user):
    assert _rows(export_for_filters(ledger, LedgerFilters(user_id=user.id))) == []
