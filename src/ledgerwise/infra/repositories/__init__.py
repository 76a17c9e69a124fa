"""Concrete repository implementations using SQLModel.

Repositories are bound to a single ``Session`` so that a service can compose
several of them inside one unit of work.
"""

from .account import SQLModelAccountRepository
from .budget import SQLModelBudgetRepository
from .category import SQLModelCategoryRepository
from .entry import SQLModelEntryRepository
from .goal import SQLModelGoalRepository
from .user import SQLModelUserRepository

__all__ = [
    "SQLModelAccountRepository",
    "SQLModelBudgetRepository",
    "SQLModelCategoryRepository",
    "SQLModelEntryRepository",
    "SQLModelGoalRepository",
    "SQLModelUserRepository",
]
