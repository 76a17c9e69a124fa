"""SQLModel implementation of Category repository."""

from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy import or_
from sqlmodel import Session, select

from ...models.category import Category


class SQLModelCategoryRepository:
    """SQLModel-based category repository implementation."""

    def __init__(self, session: Session):
        """Initialize with the session of the current unit of work."""
        self.session = session

    def get_visible(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a live category owned by the user or shared by default."""
        statement = (
            select(Category)
            .where(Category.id == category_id)
            .where(Category.is_deleted == False)  # noqa: E712
            .where(or_(Category.user_id == user_id, Category.is_default == True))  # noqa: E712
        )
        return self.session.exec(statement).first()

    def get_by_system_key(self, system_key: str) -> Optional[Category]:
        """Retrieve a singleton system category."""
        statement = select(Category).where(Category.system_key == system_key)
        return self.session.exec(statement).first()

    def count_defaults(self) -> int:
        statement = select(Category.id).where(Category.is_default == True)  # noqa: E712
        return len(self.session.exec(statement).all())

    def lookup(self, category_ids: Iterable[int]) -> dict[int, Category]:
        """Map ids to categories, deleted ones included, for labelling reports."""
        ids = {cid for cid in category_ids if cid is not None}
        if not ids:
            return {}
        statement = select(Category).where(Category.id.in_(ids))  # type: ignore
        return {c.id: c for c in self.session.exec(statement).all() if c.id is not None}

    def add(self, category: Category) -> Category:
        """Stage a category and assign its primary key."""
        self.session.add(category)
        self.session.flush()
        self.session.refresh(category)
        return category
