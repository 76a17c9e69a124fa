"""Default and system category bootstrap."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..domain.repositories import CategoryRepository
from ..infra.repositories import SQLModelCategoryRepository
from ..logging_config import get_logger
from ..models.category import TRANSFER_SYSTEM_KEY, Category

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

logger = get_logger("services.categories")

# (name, emoji, type, division)
DEFAULT_CATEGORIES: tuple[tuple[str, str, str, str], ...] = (
    ("Salary", "💰", "income", "personal"),
    ("Freelance", "💼", "income", "personal"),
    ("Investment", "📈", "income", "personal"),
    ("Gifts", "🎁", "income", "personal"),
    ("Other Income", "💵", "income", "personal"),
    ("Business Income", "💼", "income", "office"),
    ("Reimbursement", "📊", "income", "office"),
    ("Food & Dining", "🍔", "expense", "personal"),
    ("Fuel & Transport", "⛽", "expense", "personal"),
    ("Medical & Health", "💊", "expense", "personal"),
    ("Entertainment", "🎬", "expense", "personal"),
    ("Utilities", "🏠", "expense", "personal"),
    ("Shopping", "👔", "expense", "personal"),
    ("Travel", "✈️", "expense", "personal"),
    ("Education", "📚", "expense", "personal"),
    ("Other Expense", "📝", "expense", "personal"),
    ("Office Supplies", "📎", "expense", "office"),
    ("Business Transport", "🚗", "expense", "office"),
    ("Client Meals", "🍽️", "expense", "office"),
    ("Subscriptions", "📱", "expense", "office"),
    ("Office Other", "📋", "expense", "office"),
)


def _transfer_category() -> Category:
    return Category(
        user_id=None,
        name="Transfer",
        emoji="🔄",
        category_type="expense",
        division="personal",
        is_default=True,
        system_key=TRANSFER_SYSTEM_KEY,
    )


def ensure_transfer_category(categories: CategoryRepository) -> Category:
    """Get-or-create the shared Transfer category by its natural key.

    Normally seeded at bootstrap; the unique ``system_key`` rejects a
    concurrent duplicate, failing that unit of work instead of forking the
    singleton.
    """

    existing = categories.get_by_system_key(TRANSFER_SYSTEM_KEY)
    if existing is not None:
        return existing
    created = categories.add(_transfer_category())
    logger.info("Transfer category created", extra={"category_id": created.id})
    return created


def seed_default_categories(ctx: "LedgerContext") -> int:
    """Insert the shared default categories once. Returns how many were added."""

    with ctx.unit_of_work() as session:
        categories = SQLModelCategoryRepository(session)
        added = 0
        if categories.count_defaults() == 0:
            for name, emoji, category_type, division in DEFAULT_CATEGORIES:
                categories.add(
                    Category(
                        name=name,
                        emoji=emoji,
                        category_type=category_type,
                        division=division,
                        is_default=True,
                    )
                )
                added += 1
        if categories.get_by_system_key(TRANSFER_SYSTEM_KEY) is None:
            ensure_transfer_category(categories)
            added += 1

    if added:
        logger.info("Default categories seeded", extra={"count": added})
    return added
