"""Application context for dependency injection."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .clock import Clock, SystemClock
from .config import BaseConfig
from .errors import InternalError
from .infra.database import SessionFactory, bootstrap_database
from .logging_config import get_logger
from .services.windows import WindowPolicy

logger = get_logger("context")


@dataclass
class LedgerContext:
    """Everything a ledger operation needs: storage, clock and window rules."""

    config: BaseConfig
    session_factory: SessionFactory
    clock: Clock = field(default_factory=SystemClock)
    policy: WindowPolicy = field(default_factory=WindowPolicy)

    @contextmanager
    def unit_of_work(self) -> Iterator[Session]:
        """One atomic unit: commit on success, roll back everything on failure.

        Persistence errors are re-raised as ``InternalError`` after rollback.
        """
        try:
            with self.session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("Unit of work rolled back", exc_info=True)
            raise InternalError("Persistence failure; no changes were saved") from exc


def create_ledger_context(
    config: Optional[BaseConfig] = None, *, clock: Optional[Clock] = None
) -> LedgerContext:
    """Create and initialize the ledger context."""

    if config is None:
        config = BaseConfig()

    _engine, session_factory = bootstrap_database(config)

    return LedgerContext(
        config=config,
        session_factory=session_factory,
        clock=clock or SystemClock(),
        policy=WindowPolicy.from_config(config),
    )
