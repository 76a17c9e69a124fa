"""SQLModel implementation of Goal repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ...models.goal import Goal


class SQLModelGoalRepository:
    """SQLModel-based goal repository implementation."""

    def __init__(self, session: Session):
        self.session = session

    def get_by_id(self, goal_id: int, *, user_id: int) -> Optional[Goal]:
        """Retrieve a live goal owned by the user."""
        statement = (
            select(Goal)
            .where(Goal.id == goal_id)
            .where(Goal.user_id == user_id)
            .where(Goal.is_deleted == False)  # noqa: E712
        )
        return self.session.exec(statement).first()

    def add(self, goal: Goal) -> Goal:
        self.session.add(goal)
        self.session.flush()
        self.session.refresh(goal)
        return goal
