"""Account repository protocol."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Optional, Protocol

from ...models.account import Account


class AccountRepository(Protocol):
    """Repository for managing account entities."""

    def get_by_id(
        self, account_id: int, *, user_id: int, include_deleted: bool = False
    ) -> Optional[Account]:
        """Retrieve an owned account by ID."""
        ...

    def find_by_name(
        self, name: str, *, user_id: int, exclude_id: Optional[int] = None
    ) -> Optional[Account]:
        """Find an active account by case-insensitive name."""
        ...

    def list_active(self, *, user_id: int) -> list[Account]:
        """List non-deleted accounts."""
        ...

    def lookup(self, account_ids: Iterable[int]) -> dict[int, Account]:
        """Map ids to accounts, deleted ones included."""
        ...

    def add(self, account: Account) -> Account:
        """Stage a new or modified account."""
        ...

    def increment_balance(self, account_id: int, delta: Decimal) -> None:
        """Atomically add a signed delta to an account balance."""
        ...
