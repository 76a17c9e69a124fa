"""Category repository protocol."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol

from ...models.category import Category


class CategoryRepository(Protocol):
    """Repository for category lookups and system categories."""

    def get_visible(self, category_id: int, *, user_id: int) -> Optional[Category]:
        """Retrieve a category the user may file entries under."""
        ...

    def get_by_system_key(self, system_key: str) -> Optional[Category]:
        """Retrieve a singleton system category."""
        ...

    def lookup(self, category_ids: Iterable[int]) -> dict[int, Category]:
        """Map ids to categories."""
        ...

    def add(self, category: Category) -> Category:
        """Stage a category."""
        ...
