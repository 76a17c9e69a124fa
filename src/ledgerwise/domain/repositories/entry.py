"""Ledger entry repository protocol."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol

from ...models.entry import LedgerEntry


class EntryRepository(Protocol):
    """Repository for managing ledger entries."""

    def get_by_id(
        self, entry_id: int, *, user_id: int, deleted: Optional[bool] = False
    ) -> Optional[LedgerEntry]:
        """Retrieve an owned entry by ID and deletion state."""
        ...

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
        """Filter live entries."""
        ...

    def add(self, entry: LedgerEntry) -> LedgerEntry:
        """Stage a new or modified entry."""
        ...
