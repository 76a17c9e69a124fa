"""Repository protocol definitions for domain layer."""

from .account import AccountRepository
from .category import CategoryRepository
from .entry import EntryRepository

__all__ = [
    "AccountRepository",
    "CategoryRepository",
    "EntryRepository",
]
