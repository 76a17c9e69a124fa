"""SQLModel implementation of LedgerEntry repository."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from sqlmodel import Session, select

from ...models.entry import LedgerEntry


class SQLModelEntryRepository:
    """SQLModel-based ledger entry repository implementation."""

    def __init__(self, session: Session):
        """Initialize with the session of the current unit of work."""
        self.session = session

    def get_by_id(
        self, entry_id: int, *, user_id: int, deleted: Optional[bool] = False
    ) -> Optional[LedgerEntry]:
        """Retrieve an owned entry by ID.

        ``deleted`` selects live entries (False), soft-deleted ones (True) or
        either (None).
        """
        statement = (
            select(LedgerEntry)
            .where(LedgerEntry.id == entry_id)
            .where(LedgerEntry.user_id == user_id)
        )
        if deleted is not None:
            statement = statement.where(LedgerEntry.is_deleted == deleted)
        return self.session.exec(statement).first()

    def search(
        self,
        *,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        kinds: Optional[Iterable[str]] = None,
        division: Optional[str] = None,
        category_id: Optional[int] = None,
        account_id: Optional[int] = None,
        text: Optional[str] = None,
    ) -> list[LedgerEntry]:
        """Non-deleted entries matching every supplied filter, newest first."""
        statement = (
            select(LedgerEntry)
            .where(LedgerEntry.user_id == user_id)
            .where(LedgerEntry.is_deleted == False)  # noqa: E712
        )

        if start_date is not None:
            statement = statement.where(LedgerEntry.occurred_on >= start_date)
        if end_date is not None:
            statement = statement.where(LedgerEntry.occurred_on <= end_date)
        if kinds is not None:
            statement = statement.where(LedgerEntry.kind.in_(list(kinds)))  # type: ignore
        if division:
            statement = statement.where(LedgerEntry.division == division)
        if category_id is not None:
            statement = statement.where(LedgerEntry.category_id == category_id)
        if account_id is not None:
            statement = statement.where(LedgerEntry.account_id == account_id)
        if text:
            statement = statement.where(LedgerEntry.description.ilike(f"%{text}%"))  # type: ignore

        statement = statement.order_by(
            LedgerEntry.occurred_on.desc(), LedgerEntry.id.desc()  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def list_for_account(self, account_id: int, *, user_id: int) -> list[LedgerEntry]:
        """All live entries touching an account."""
        return self.search(user_id=user_id, account_id=account_id)

    def add(self, entry: LedgerEntry) -> LedgerEntry:
        """Stage a new or modified entry and assign its primary key."""
        self.session.add(entry)
        self.session.flush()
        self.session.refresh(entry)
        return entry
