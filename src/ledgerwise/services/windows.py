"""Time-boxed mutation rules for ledger entries.

Two independent, stateless checks:

* the edit window: an entry may be updated or deleted only while less than
  ``edit_window`` has elapsed since it was created;
* the undo window: a soft-deleted entry may be restored only while less than
  ``undo_window`` has elapsed since it was deleted.

Both are evaluated against the clock at call time, never cached.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..config import BaseConfig
from ..errors import EditWindowExpired, UndoExpired
from ..logging_config import get_logger
from ..models.entry import LedgerEntry

EDIT_WINDOW = timedelta(hours=12)
UNDO_WINDOW = timedelta(seconds=30)

logger = get_logger("services.windows")


@dataclass(frozen=True)
class WindowPolicy:
    """Edit and undo windows applied to ledger entries."""

    edit_window: timedelta = EDIT_WINDOW
    undo_window: timedelta = UNDO_WINDOW

    @classmethod
    def from_config(cls, config: BaseConfig) -> "WindowPolicy":
        return cls(
            edit_window=timedelta(hours=config.EDIT_WINDOW_HOURS),
            undo_window=timedelta(seconds=config.UNDO_WINDOW_SECONDS),
        )

    def can_edit(self, created_at: datetime, *, now: datetime) -> bool:
        return (now - created_at) < self.edit_window

    def can_undo(self, deleted_at: datetime | None, *, now: datetime) -> bool:
        if deleted_at is None:
            return False
        return (now - deleted_at) < self.undo_window

    def ensure_editable(self, entry: LedgerEntry, *, now: datetime, action: str = "modify") -> None:
        """Raise ``EditWindowExpired`` when the entry is past its edit window."""

        if self.can_edit(entry.created_at, now=now):
            return
        hours = self.edit_window.total_seconds() / 3600
        logger.warning(
            "Edit window expired",
            extra={"entry_id": entry.id, "action": action, "created_at": entry.created_at},
        )
        raise EditWindowExpired(f"Cannot {action} transactions older than {hours:g} hours")

    def ensure_restorable(self, entry: LedgerEntry, *, now: datetime) -> None:
        """Raise ``UndoExpired`` once the undo window has closed."""

        if self.can_undo(entry.deleted_at, now=now):
            return
        logger.warning(
            "Undo window expired",
            extra={"entry_id": entry.id, "deleted_at": entry.deleted_at},
        )
        raise UndoExpired("Undo window expired. Transaction cannot be restored.")


DEFAULT_POLICY = WindowPolicy()


def can_edit(created_at: datetime, *, now: datetime) -> bool:
    """True while ``created_at`` is within the default 12-hour edit window."""

    return DEFAULT_POLICY.can_edit(created_at, now=now)


def can_undo(deleted_at: datetime | None, *, now: datetime) -> bool:
    """True while ``deleted_at`` is within the default 30-second undo window."""

    return DEFAULT_POLICY.can_undo(deleted_at, now=now)
