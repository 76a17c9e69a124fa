"""Account lifecycle: defaults, creation, override edits and soft deletion."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Mapping

from ..domain.repositories import AccountRepository
from ..errors import ConflictError, NotFoundError
from ..infra.repositories import SQLModelAccountRepository, SQLModelEntryRepository
from ..logging_config import get_logger
from ..models.account import Account
from ..schemas import AccountCreate, AccountUpdate, validate_payload
from .balances import effect_kind, signed_effect

if TYPE_CHECKING:  # pragma: no cover
    from ..context import LedgerContext

logger = get_logger("services.accounts")

DEFAULT_ACCOUNTS: tuple[tuple[str, str], ...] = (
    ("Cash", "cash"),
    ("Bank Account", "bank"),
)


@dataclass(frozen=True)
class AccountListing:
    accounts: list[Account]
    total_balance: Decimal


def create_default_accounts(
    accounts: AccountRepository, *, user_id: int, now: datetime
) -> list[Account]:
    """Stage the zero-balance Cash and Bank Account pair for a new owner.

    Runs inside the caller's unit of work so the owner and the accounts
    commit together.
    """

    created = []
    for name, account_type in DEFAULT_ACCOUNTS:
        if accounts.find_by_name(name, user_id=user_id) is not None:
            continue
        created.append(
            accounts.add(
                Account(
                    user_id=user_id,
                    name=name,
                    account_type=account_type,
                    balance=Decimal("0"),
                    created_at=now,
                    updated_at=now,
                )
            )
        )
    return created


def create_account(
    ctx: "LedgerContext",
    *,
    user_id: int,
    name: str,
    account_type: str,
    balance: Any = 0,
) -> Account:
    """Create an account; names are unique per owner, ignoring case."""

    payload = validate_payload(
        AccountCreate, {"name": name, "account_type": account_type, "balance": balance}
    )
    now = ctx.clock.utcnow()
    with ctx.unit_of_work() as session:
        accounts = SQLModelAccountRepository(session)
        if accounts.find_by_name(payload.name, user_id=user_id) is not None:
            raise ConflictError("Account with this name already exists")
        account = accounts.add(
            Account(
                user_id=user_id,
                name=payload.name,
                account_type=payload.account_type,
                balance=payload.balance,
                created_at=now,
                updated_at=now,
            )
        )
    logger.info("Account created", extra={"account_id": account.id, "user_id": user_id})
    return account


def list_accounts(ctx: "LedgerContext", *, user_id: int) -> AccountListing:
    with ctx.unit_of_work() as session:
        rows = SQLModelAccountRepository(session).list_active(user_id=user_id)
    total = sum((Decimal(a.balance) for a in rows), Decimal("0"))
    return AccountListing(accounts=rows, total_balance=total)


def update_account(
    ctx: "LedgerContext", account_id: int, *, user_id: int, changes: Mapping[str, Any]
) -> Account:
    """Edit name, type or balance directly.

    A balance supplied here is an authoritative override: it replaces the
    stored value and bypasses entry-driven synchronization.
    """

    fields = validate_payload(AccountUpdate, changes).changes()
    with ctx.unit_of_work() as session:
        accounts = SQLModelAccountRepository(session)
        account = accounts.get_by_id(account_id, user_id=user_id)
        if account is None:
            raise NotFoundError("Account not found")
        if "name" in fields and accounts.find_by_name(
            fields["name"], user_id=user_id, exclude_id=account_id
        ):
            raise ConflictError("Account with this name already exists")
        for name, value in fields.items():
            setattr(account, name, value)
        account.updated_at = ctx.clock.utcnow()
        account = accounts.add(account)
    if "balance" in fields:
        logger.warning(
            "Account balance overridden",
            extra={"account_id": account_id, "balance": str(fields["balance"])},
        )
    return account


def delete_account(ctx: "LedgerContext", account_id: int, *, user_id: int) -> Account:
    """Soft-delete an account; its entries and balance history stay intact."""

    with ctx.unit_of_work() as session:
        accounts = SQLModelAccountRepository(session)
        account = accounts.get_by_id(account_id, user_id=user_id)
        if account is None:
            raise NotFoundError("Account not found")
        account.is_deleted = True
        account.updated_at = ctx.clock.utcnow()
        account = accounts.add(account)
    logger.info("Account deleted", extra={"account_id": account_id})
    return account


def ledger_balance(ctx: "LedgerContext", account_id: int, *, user_id: int) -> Decimal:
    """Sum of signed effects of the account's live entries.

    Equals the stored balance as long as the balance was never overridden and
    the account started at zero; used for reconciliation checks.
    """

    with ctx.unit_of_work() as session:
        entries = SQLModelEntryRepository(session).list_for_account(account_id, user_id=user_id)
        return sum(
            (signed_effect(effect_kind(entry), entry.amount) for entry in entries),
            Decimal("0"),
        )
