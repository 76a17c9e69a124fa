"""Owner records for ledger data."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..clock import utcnow
from .columns import NaiveDateTime


class User(SQLModel, table=True):
    """Owner of accounts, entries, budgets and goals.

    Credentials live with the external auth service; only identity is kept here.
    """

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)
