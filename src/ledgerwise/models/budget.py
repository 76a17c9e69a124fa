"""Budget targets per category."""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

BUDGET_PERIODS = ("weekly", "monthly")


class Budget(SQLModel, table=True):
    """Spending target for one category over a weekly or monthly window."""

    __tablename__: ClassVar[str] = "budget"
    __table_args__ = (UniqueConstraint("user_id", "category_id", name="uq_budget_user_category"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    category_id: int = Field(foreign_key="category.id", nullable=False)
    amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    period: str = Field(default="monthly", nullable=False, max_length=16)
