"""Owner bootstrap used when an identity first reaches the ledger."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..errors import ConflictError, ValidationError
from ..infra.repositories import SQLModelAccountRepository, SQLModelUserRepository
from ..logging_config import get_logger
from ..models.user import User
from .accounts import create_default_accounts

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

logger = get_logger("services.owners")


def register_owner(ctx: "LedgerContext", *, username: str) -> User:
    """Create a ledger owner and the default Cash and Bank accounts in one unit of work."""

    username = (username or "").strip()
    if not username:
        raise ValidationError("Username is required")
    now = ctx.clock.utcnow()
    with ctx.unit_of_work() as session:
        users = SQLModelUserRepository(session)
        if users.get_by_username(username) is not None:
            raise ConflictError("User already exists")
        user = users.add(User(username=username, created_at=now))
        create_default_accounts(SQLModelAccountRepository(session), user_id=user.id, now=now)

    logger.info("Owner registered", extra={"user_id": user.id})
    return user
