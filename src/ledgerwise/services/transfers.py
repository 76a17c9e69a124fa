"""Two-legged transfers between a user's accounts."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional

from ..errors import NotFoundError, ValidationError
from ..infra.repositories import (
    SQLModelAccountRepository,
    SQLModelCategoryRepository,
    SQLModelEntryRepository,
)
from ..logging_config import get_logger
from ..models.entry import LedgerEntry
from ..schemas import TransferRequest, validate_payload
from .balances import APPLY, apply_entry
from .categories import ensure_transfer_category

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

logger = get_logger("services.transfers")

# Transfers are not attributed to the office division.
TRANSFER_DIVISION = "personal"


@dataclass(frozen=True)
class TransferResult:
    withdrawal: LedgerEntry
    deposit: LedgerEntry

    @property
    def amount(self) -> Decimal:
        return self.withdrawal.amount


def transfer(
    ctx: "LedgerContext",
    *,
    user_id: int,
    from_account_id: int,
    to_account_id: int,
    amount: Any,
    occurred_on: Optional[Any] = None,
    description: Optional[str] = None,
) -> TransferResult:
    """Move money between two owned accounts as one atomic unit.

    Checks, first failure wins: both accounts exist and are live, they differ,
    and the amount is positive. Then both legs are inserted, cross-linked, and
    the two balances moved. Any failure leaves no leg and no balance change.
    """

    payload = validate_payload(
        TransferRequest,
        {
            "from_account_id": from_account_id,
            "to_account_id": to_account_id,
            "amount": amount,
            "occurred_on": occurred_on if occurred_on is not None else ctx.clock.localnow(),
            "description": description,
        },
    )

    now = ctx.clock.utcnow()
    with ctx.unit_of_work() as session:
        accounts = SQLModelAccountRepository(session)
        entries = SQLModelEntryRepository(session)

        source = accounts.get_by_id(payload.from_account_id, user_id=user_id)
        target = accounts.get_by_id(payload.to_account_id, user_id=user_id)
        if source is None or target is None:
            logger.warning(
                "Transfer rejected: account missing",
                extra={"from_account_id": from_account_id, "to_account_id": to_account_id},
            )
            raise NotFoundError("One or both accounts not found")
        if source.id == target.id:
            raise ValidationError("Cannot transfer to the same account")
        if payload.amount <= 0:
            raise ValidationError("Amount must be a positive number")

        category = ensure_transfer_category(SQLModelCategoryRepository(session))
        withdrawal = entries.add(
            _leg(
                user_id=user_id,
                leg="withdrawal",
                account_id=source.id,
                category_id=category.id,
                amount=payload.amount,
                occurred_on=payload.occurred_on,
                description=payload.description or f"Transfer to {target.name}",
                now=now,
            )
        )
        deposit = _leg(
            user_id=user_id,
            leg="deposit",
            account_id=target.id,
            category_id=category.id,
            amount=payload.amount,
            occurred_on=payload.occurred_on,
            description=payload.description or f"Transfer from {source.name}",
            now=now,
        )
        deposit.linked_entry_id = withdrawal.id
        deposit = entries.add(deposit)
        withdrawal.linked_entry_id = deposit.id
        withdrawal = entries.add(withdrawal)

        apply_entry(accounts, withdrawal, APPLY)
        apply_entry(accounts, deposit, APPLY)

    logger.info(
        "Transfer recorded",
        extra={
            "withdrawal_id": withdrawal.id,
            "deposit_id": deposit.id,
            "from_account_id": withdrawal.account_id,
            "to_account_id": deposit.account_id,
            "amount": str(payload.amount),
        },
    )
    return TransferResult(withdrawal=withdrawal, deposit=deposit)


def _leg(
    *,
    user_id: int,
    leg: str,
    account_id: Optional[int],
    category_id: Optional[int],
    amount: Decimal,
    occurred_on: datetime,
    description: str,
    now: datetime,
) -> LedgerEntry:
    return LedgerEntry(
        user_id=user_id,
        kind="transfer",
        transfer_leg=leg,
        amount=amount,
        category_id=category_id,
        description=description[:200],
        occurred_on=occurred_on,
        division=TRANSFER_DIVISION,
        account_id=account_id,
        created_at=now,
        updated_at=now,
    )
