"""SQLModel implementation of Account repository."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import func, update
from sqlalchemy.orm.exc import StaleDataError
from sqlmodel import Session, select

from ...models.account import Account


class SQLModelAccountRepository:
    """SQLModel-based account repository implementation."""

    def __init__(self, session: Session):
        """Initialize with the session of the current unit of work."""
        self.session = session

    def get_by_id(
        self, account_id: int, *, user_id: int, include_deleted: bool = False
    ) -> Optional[Account]:
        """Retrieve an owned account by ID."""
        statement = (
            select(Account)
            .where(Account.id == account_id)
            .where(Account.user_id == user_id)
        )
        if not include_deleted:
            statement = statement.where(Account.is_deleted == False)  # noqa: E712
        return self.session.exec(statement).first()

    def find_by_name(
        self, name: str, *, user_id: int, exclude_id: Optional[int] = None
    ) -> Optional[Account]:
        """Find an active account whose name matches case-insensitively."""
        statement = (
            select(Account)
            .where(Account.user_id == user_id)
            .where(Account.is_deleted == False)  # noqa: E712
            .where(func.lower(Account.name) == name.strip().lower())
        )
        if exclude_id is not None:
            statement = statement.where(Account.id != exclude_id)
        return self.session.exec(statement).first()

    def list_active(self, *, user_id: int) -> list[Account]:
        """List non-deleted accounts ordered by name."""
        statement = (
            select(Account)
            .where(Account.user_id == user_id)
            .where(Account.is_deleted == False)  # noqa: E712
            .order_by(Account.name)  # type: ignore
        )
        return list(self.session.exec(statement).all())

    def lookup(self, account_ids: Iterable[int]) -> dict[int, Account]:
        """Map ids to accounts, deleted ones included, for labelling exports."""
        ids = {aid for aid in account_ids if aid is not None}
        if not ids:
            return {}
        statement = select(Account).where(Account.id.in_(ids))  # type: ignore
        return {a.id: a for a in self.session.exec(statement).all() if a.id is not None}

    def add(self, account: Account) -> Account:
        """Stage a new or modified account and assign its primary key."""
        self.session.add(account)
        self.session.flush()
        self.session.refresh(account)
        return account

    def increment_balance(self, account_id: int, delta: Decimal) -> None:
        """Atomically add ``delta`` to the stored balance.

        The arithmetic runs inside the database so concurrent writers on the
        same row never lose an update.
        """
        statement = (
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + delta)
            .execution_options(synchronize_session=False)
        )
        result = self.session.exec(statement)  # type: ignore[call-overload]
        if result.rowcount != 1:
            raise StaleDataError(f"account {account_id} vanished during balance update")
        # Drop any cached copy so the next read sees the stored value.
        cached = self.session.get(Account, account_id)
        if cached is not None:
            self.session.expire(cached)
