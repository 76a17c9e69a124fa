"""SQLModel implementation of Budget repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.budget import Budget


class SQLModelBudgetRepository:
    """SQLModel-based budget repository implementation."""

    def __init__(self, session: Session):
        """Initialize with the session of the current unit of work."""
        self.session = session

    def list_all(self, *, user_id: int) -> list[Budget]:
        """List budgets in record order."""
        statement = select(Budget).where(Budget.user_id == user_id)
        statement = statement.order_by(Budget.id)  # type: ignore
        return list(self.session.exec(statement).all())

    def get_for_category(self, category_id: int, *, user_id: int) -> Optional[Budget]:
        statement = (
            select(Budget)
            .where(Budget.user_id == user_id)
            .where(Budget.category_id == category_id)
        )
        return self.session.exec(statement).first()

    def add(self, budget: Budget) -> Budget:
        """Stage a new or modified budget."""
        self.session.add(budget)
        self.session.flush()
        self.session.refresh(budget)
        return budget
