"""SQLModel table exports."""

from .account import Account
from .budget import Budget
from .category import Category
from .entry import LedgerEntry
from .goal import Goal
from .user import User

__all__ = [
    "Account",
    "Budget",
    "Category",
    "Goal",
    "LedgerEntry",
    "User",
]
