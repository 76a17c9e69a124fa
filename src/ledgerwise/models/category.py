"""Ledger category definitions."""

from __future__ import annotations

from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

CATEGORY_TYPES = ("income", "expense")
TRANSFER_SYSTEM_KEY = "transfer"


class Category(SQLModel, table=True):
    """Category used for reporting and budgets.

    Default categories have no owner and are visible to every user. Singleton
    system categories (currently only Transfer) carry a unique ``system_key``.
    """

    __tablename__: ClassVar[str] = "category"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)
    name: str = Field(index=True, nullable=False, max_length=50)
    emoji: str = Field(default="", max_length=8)
    category_type: str = Field(default="expense", nullable=False, max_length=16)
    division: str = Field(default="personal", nullable=False, max_length=16)
    is_default: bool = Field(default=False, nullable=False, index=True)
    system_key: Optional[str] = Field(default=None, unique=True, max_length=32)
    is_deleted: bool = Field(default=False, nullable=False)
