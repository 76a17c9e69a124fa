"""SQLModel definition for ledger entries."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..clock import utcnow
from .columns import NaiveDateTime

ENTRY_KINDS = ("income", "expense", "transfer")
DIVISIONS = ("personal", "office")
TRANSFER_LEGS = ("withdrawal", "deposit")
DESCRIPTION_MAX_LENGTH = 200


class LedgerEntry(SQLModel, table=True):
    """A single money movement: income, expense, or one leg of a transfer."""

    __tablename__: ClassVar[str] = "ledger_entry"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    kind: str = Field(nullable=False, max_length=16, index=True)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    category_id: int = Field(foreign_key="category.id", nullable=False, index=True)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)
    occurred_on: datetime = Field(nullable=False, index=True, sa_type=NaiveDateTime)
    division: str = Field(default="personal", nullable=False, max_length=16, index=True)
    account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)

    # Transfer legs point at each other; ``transfer_leg`` says which way money moved.
    linked_entry_id: Optional[int] = Field(default=None, foreign_key="ledger_entry.id")
    transfer_leg: Optional[str] = Field(default=None, max_length=16)

    is_deleted: bool = Field(default=False, nullable=False, index=True)
    deleted_at: Optional[datetime] = Field(default=None, sa_type=NaiveDateTime)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)

    @property
    def is_transfer(self) -> bool:
        return self.kind == "transfer"
