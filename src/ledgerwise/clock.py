"""Clock abstraction used by time-relative rules."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    """Source of "now" for the window policy and period derivation."""

    def utcnow(self) -> datetime:
        """Naive UTC timestamp used for created/deleted stamps."""
        ...

    def localnow(self) -> datetime:
        """Naive local wall-clock time used for period windows."""
        ...


class SystemClock:
    """Clock backed by the host's wall clock."""

    def utcnow(self) -> datetime:
        # Stored timestamps are naive UTC; SQLite drops tzinfo anyway.
        return datetime.now(timezone.utc).replace(tzinfo=None)

    def localnow(self) -> datetime:
        return datetime.now()


def utcnow() -> datetime:
    """Default factory for model timestamps."""

    return SystemClock().utcnow()
