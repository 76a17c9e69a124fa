"""Money-holding accounts whose balances the ledger keeps in sync."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..clock import utcnow
from .columns import NaiveDateTime

ACCOUNT_TYPES = ("bank", "cash", "wallet")
NAME_MAX_LENGTH = 50


class Account(SQLModel, table=True):
    """A user's bank account, cash pocket or wallet."""

    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=NAME_MAX_LENGTH)
    account_type: str = Field(nullable=False, max_length=16)
    # Signed; no overdraft floor.
    balance: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    is_deleted: bool = Field(default=False, nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)
    updated_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)
