"""Ledger services: each public function is one unit of work."""

from .accounts import create_account, delete_account, list_accounts, update_account
from .budgets import set_budget
from .categories import seed_default_categories
from .entries import LedgerFilters, Pagination, create_entry, delete_entry, list_entries, restore_entry, update_entry
from .goals import contribute
from .insights import select_insight
from .owners import register_owner
from .reports import budget_status, category_breakdown, daily_trend, summarize
from .transfers import TransferResult, transfer

__all__ = [
    "LedgerFilters",
    "Pagination",
    "TransferResult",
    "budget_status",
    "category_breakdown",
    "contribute",
    "create_account",
    "create_entry",
    "daily_trend",
    "delete_account",
    "delete_entry",
    "list_accounts",
    "list_entries",
    "register_owner",
    "restore_entry",
    "seed_default_categories",
    "select_insight",
    "set_budget",
    "summarize",
    "transfer",
    "update_account",
    "update_entry",
]
