"""Savings goals."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

from ..clock import utcnow
from .columns import NaiveDateTime


class Goal(SQLModel, table=True):
    """Independent savings target fed by manual contributions."""

    __tablename__: ClassVar[str] = "goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=100)
    target_amount: Decimal = Field(nullable=False, max_digits=14, decimal_places=2)
    current_amount: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    target_date: date = Field(nullable=False)
    is_completed: bool = Field(default=False, nullable=False)
    is_deleted: bool = Field(default=False, nullable=False)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, sa_type=NaiveDateTime)

    @property
    def progress(self) -> int:
        if self.target_amount == 0:
            return 100
        ratio = Decimal(self.current_amount) / Decimal(self.target_amount) * 100
        return min(100, int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))

    @property
    def remaining_amount(self) -> Decimal:
        return max(Decimal("0"), Decimal(self.target_amount) - Decimal(self.current_amount))

    def days_remaining(self, *, today: date) -> int:
        return max(0, (self.target_date - today).days)
