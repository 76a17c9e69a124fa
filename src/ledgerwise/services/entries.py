"""Ledger entry operations: create, edit, soft delete, restore and listing.

Each public function runs as one unit of work. Validation and ownership
checks happen before anything is written; balance effects are applied through
:mod:`ledgerwise.services.balances` exactly once per transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from math import ceil
from typing import TYPE_CHECKING, Any, Mapping, Optional

from ..domain.repositories import EntryRepository
from ..errors import NotFoundError, ValidationError
from ..infra.repositories import (
    SQLModelAccountRepository,
    SQLModelCategoryRepository,
    SQLModelEntryRepository,
)
from ..logging_config import get_logger
from ..models.entry import LedgerEntry
from ..schemas import EntryCreate, EntryUpdate, validate_payload
from .balances import APPLY, REVERSE, EffectState, apply_effect, apply_entry, reconcile_update

if TYPE_CHECKING:  # pragma: no cover
    from sqlmodel import Session

    from ..context import LedgerContext

logger = get_logger("services.entries")

TRANSFER_EDITABLE_FIELDS = frozenset({"description", "occurred_on"})

_SORT_KEYS = {
    "date": lambda e: (e.occurred_on, e.id or 0),
    "amount": lambda e: (e.amount, e.id or 0),
    "created": lambda e: (e.created_at, e.id or 0),
}


@dataclass
class LedgerFilters:
    """Filters applied to entry listings."""

    user_id: int
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    category_id: Optional[int] = None
    account_id: Optional[int] = None
    text: Optional[str] = None
    kind: str = "all"  # income | expense | transfer | all
    division: Optional[str] = None  # personal | office | None for both


@dataclass
class Pagination:
    """Page parameters plus a sort token such as ``-date`` or ``amount``."""

    page: int = 1
    per_page: int = 20
    sort: str = "-date"


@dataclass(frozen=True)
class EntryRow:
    entry: LedgerEntry
    can_edit: bool


@dataclass(frozen=True)
class EntryPage:
    rows: list[EntryRow]
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        return ceil(self.total / self.per_page) if self.total else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def _check_category(session: "Session", category_id: int, *, user_id: int) -> None:
    if SQLModelCategoryRepository(session).get_visible(category_id, user_id=user_id) is None:
        raise NotFoundError("Category not found")


def _check_account(session: "Session", account_id: Optional[int], *, user_id: int) -> None:
    if account_id is None:
        return
    if SQLModelAccountRepository(session).get_by_id(account_id, user_id=user_id) is None:
        raise NotFoundError("Account not found")


def create_entry(ctx: "LedgerContext", *, user_id: int, data: Mapping[str, Any]) -> LedgerEntry:
    """Record an income or expense and apply its effect to the linked account."""

    if data.get("kind") == "transfer":
        raise ValidationError("Transfers must be recorded with the transfer operation")
    payload = validate_payload(EntryCreate, data)

    now = ctx.clock.utcnow()
    with ctx.unit_of_work() as session:
        _check_category(session, payload.category_id, user_id=user_id)
        _check_account(session, payload.account_id, user_id=user_id)

        entry = SQLModelEntryRepository(session).add(
            LedgerEntry(
                user_id=user_id,
                kind=payload.kind,
                amount=payload.amount,
                category_id=payload.category_id,
                description=payload.description,
                occurred_on=payload.occurred_on,
                division=payload.division,
                account_id=payload.account_id,
                created_at=now,
                updated_at=now,
            )
        )
        apply_effect(
            SQLModelAccountRepository(session), entry.account_id, entry.amount, entry.kind, APPLY
        )

    logger.info(
        "Entry created",
        extra={"entry_id": entry.id, "user_id": user_id, "kind": entry.kind, "amount": str(entry.amount)},
    )
    return entry


def update_entry(
    ctx: "LedgerContext", entry_id: int, *, user_id: int, changes: Mapping[str, Any]
) -> LedgerEntry:
    """Apply a partial edit inside the edit window.

    Balances move by the net difference between the old and the new state.
    Transfer legs only accept description and date changes; a new date is
    carried over to the linked leg.
    """

    if changes.get("kind") == "transfer":
        raise ValidationError("Entries cannot be converted into transfers")
    fields = validate_payload(EntryUpdate, changes).changes()

    now = ctx.clock.utcnow()
    with ctx.unit_of_work() as session:
        entries = SQLModelEntryRepository(session)
        entry = entries.get_by_id(entry_id, user_id=user_id)
        if entry is None:
            raise NotFoundError("Transaction not found")
        ctx.policy.ensure_editable(entry, now=now, action="edit")

        if entry.is_transfer:
            rejected = sorted(set(fields) - TRANSFER_EDITABLE_FIELDS)
            if rejected:
                raise ValidationError(
                    "Transfer entries only allow description and date changes",
                    details={"fields": rejected},
                )
        else:
            if "category_id" in fields:
                _check_category(session, fields["category_id"], user_id=user_id)
            if fields.get("account_id") is not None:
                _check_account(session, fields["account_id"], user_id=user_id)

        before = None if entry.is_transfer else EffectState.of(entry)
        for name, value in fields.items():
            if name == "description" and value is None:
                value = ""
            setattr(entry, name, value)
        entry.updated_at = now
        entry = entries.add(entry)

        if entry.is_transfer and "occurred_on" in fields:
            # Both legs of a transfer always share one date.
            for leg in _with_linked_leg(entries, entry, deleted=False)[1:]:
                leg.occurred_on = entry.occurred_on
                leg.updated_at = now
                entries.add(leg)

        if before is not None:
            reconcile_update(SQLModelAccountRepository(session), before, EffectState.of(entry))

    logger.info("Entry updated", extra={"entry_id": entry_id, "fields": sorted(fields)})
    return entry


def _with_linked_leg(
    entries: EntryRepository, entry: LedgerEntry, *, deleted: bool
) -> list[LedgerEntry]:
    legs = [entry]
    if entry.is_transfer and entry.linked_entry_id is not None:
        linked = entries.get_by_id(entry.linked_entry_id, user_id=entry.user_id, deleted=deleted)
        if linked is not None:
            legs.append(linked)
    return legs


def delete_entry(ctx: "LedgerContext", entry_id: int, *, user_id: int) -> LedgerEntry:
    """Soft-delete an entry and reverse its effect.

    Deleting either transfer leg removes the whole transfer.
    """

    now = ctx.clock.utcnow()
    with ctx.unit_of_work() as session:
        entries = SQLModelEntryRepository(session)
        accounts = SQLModelAccountRepository(session)
        entry = entries.get_by_id(entry_id, user_id=user_id)
        if entry is None:
            raise NotFoundError("Transaction not found")
        ctx.policy.ensure_editable(entry, now=now, action="delete")

        for leg in _with_linked_leg(entries, entry, deleted=False):
            leg.is_deleted = True
            leg.deleted_at = now
            leg.updated_at = now
            entries.add(leg)
            apply_entry(accounts, leg, REVERSE)

    logger.info("Entry deleted", extra={"entry_id": entry_id, "user_id": user_id})
    return entry


def restore_entry(ctx: "LedgerContext", entry_id: int, *, user_id: int) -> LedgerEntry:
    """Undo a soft delete while the undo window is open."""

    now = ctx.clock.utcnow()
    with ctx.unit_of_work() as session:
        entries = SQLModelEntryRepository(session)
        accounts = SQLModelAccountRepository(session)
        entry = entries.get_by_id(entry_id, user_id=user_id, deleted=True)
        if entry is None:
            raise NotFoundError("Deleted transaction not found")
        ctx.policy.ensure_restorable(entry, now=now)

        for leg in _with_linked_leg(entries, entry, deleted=True):
            leg.is_deleted = False
            leg.deleted_at = None
            leg.updated_at = now
            entries.add(leg)
            apply_entry(accounts, leg, APPLY)

    logger.info("Entry restored", extra={"entry_id": entry_id, "user_id": user_id})
    return entry


def filtered_entries(session: "Session", filters: LedgerFilters) -> list[LedgerEntry]:
    """Live entries matching the filters, newest first; ``all`` disables a filter."""

    kinds = None if filters.kind in (None, "", "all") else [filters.kind]
    division = None if filters.division in (None, "", "all") else filters.division
    return SQLModelEntryRepository(session).search(
        user_id=filters.user_id,
        start_date=filters.start_date,
        end_date=filters.end_date,
        kinds=kinds,
        division=division,
        category_id=filters.category_id,
        account_id=filters.account_id,
        text=filters.text,
    )


def _sorted(rows: list[LedgerEntry], sort: str) -> list[LedgerEntry]:
    token = (sort or "-date").strip()
    descending = token.startswith("-")
    key = _SORT_KEYS.get(token.lstrip("-+"), _SORT_KEYS["date"])
    return sorted(rows, key=key, reverse=descending)


def list_entries(
    ctx: "LedgerContext", filters: LedgerFilters, pagination: Optional[Pagination] = None
) -> EntryPage:
    """Fetch, sort and paginate live entries; each row says whether it is still editable."""

    pagination = pagination or Pagination()
    with ctx.unit_of_work() as session:
        rows = filtered_entries(session, filters)

    rows = _sorted(rows, pagination.sort)
    page = max(1, pagination.page)
    per_page = max(1, pagination.per_page)
    start = (page - 1) * per_page
    now = ctx.clock.utcnow()
    return EntryPage(
        rows=[
            EntryRow(entry=entry, can_edit=ctx.policy.can_edit(entry.created_at, now=now))
            for entry in rows[start : start + per_page]
        ],
        total=len(rows),
        page=page,
        per_page=per_page,
    )
