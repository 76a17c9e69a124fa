"""Balance synchronization for ledger entries.

Every entry transition changes stored account balances exactly once:
create applies the entry's effect, delete reverses it, restore re-applies it,
and update applies the *net* difference between the old and new state. The
deltas are pushed to the database as atomic increments.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..domain.repositories import AccountRepository
from ..logging_config import get_logger
from ..models.entry import LedgerEntry

APPLY = "apply"
REVERSE = "reverse"

logger = get_logger("services.balances")


def signed_effect(kind: str, amount: Decimal) -> Decimal:
    """Signed change an income or expense of ``amount`` makes to its account."""

    if kind == "income":
        return Decimal(amount)
    if kind == "expense":
        return -Decimal(amount)
    raise ValueError(f"no direct balance effect for kind {kind!r}")


def effect_kind(entry: LedgerEntry) -> str:
    """Income/expense equivalent of an entry; transfer legs map by direction."""

    if entry.kind == "transfer":
        if entry.transfer_leg == "withdrawal":
            return "expense"
        if entry.transfer_leg == "deposit":
            return "income"
        raise ValueError(f"transfer entry {entry.id} has no leg direction")
    return entry.kind


def apply_effect(
    accounts: AccountRepository,
    account_id: Optional[int],
    amount: Decimal,
    kind: str,
    direction: str = APPLY,
) -> Decimal:
    """Apply (or reverse) one entry effect on one account.

    ``kind`` must be ``income`` or ``expense``; transfers are applied leg by
    leg by the transfer orchestrator. A missing account is a no-op. Returns the
    delta written.
    """

    if kind == "transfer":
        raise ValueError("transfer effects are applied per leg")
    if direction not in (APPLY, REVERSE):
        raise ValueError(f"unknown direction {direction!r}")
    if account_id is None:
        return Decimal("0")

    delta = signed_effect(kind, amount)
    if direction == REVERSE:
        delta = -delta
    if delta != 0:
        accounts.increment_balance(account_id, delta)
        logger.info(
            "Account balance adjusted",
            extra={"account_id": account_id, "delta": str(delta), "kind": kind, "direction": direction},
        )
    return delta


def apply_entry(accounts: AccountRepository, entry: LedgerEntry, direction: str = APPLY) -> Decimal:
    """Apply or reverse a stored entry, transfer legs included."""

    return apply_effect(accounts, entry.account_id, entry.amount, effect_kind(entry), direction)


@dataclass(frozen=True)
class EffectState:
    """The balance-relevant slice of an entry at one point in time."""

    account_id: Optional[int]
    kind: str
    amount: Decimal

    @classmethod
    def of(cls, entry: LedgerEntry) -> "EffectState":
        return cls(account_id=entry.account_id, kind=entry.kind, amount=Decimal(entry.amount))


def update_deltas(old: EffectState, new: EffectState) -> list[tuple[int, Decimal]]:
    """Per-account deltas that move balances from ``old`` to ``new``.

    A changed account reverses the old effect there and applies the new one on
    the new account. An unchanged account gets a single net delta, so readers
    never observe an intermediate reversed state.
    """

    if "transfer" in (old.kind, new.kind):
        raise ValueError("transfer legs are reconciled by the transfer orchestrator")

    deltas: list[tuple[int, Decimal]] = []
    if old.account_id != new.account_id:
        if old.account_id is not None:
            deltas.append((old.account_id, -signed_effect(old.kind, old.amount)))
        if new.account_id is not None:
            deltas.append((new.account_id, signed_effect(new.kind, new.amount)))
    elif old.account_id is not None:
        net = signed_effect(new.kind, new.amount) - signed_effect(old.kind, old.amount)
        if net != 0:
            deltas.append((old.account_id, net))
    return [(account_id, delta) for account_id, delta in deltas if delta != 0]


def reconcile_update(
    accounts: AccountRepository, old: EffectState, new: EffectState
) -> list[tuple[int, Decimal]]:
    """Write the deltas computed by :func:`update_deltas`."""

    deltas = update_deltas(old, new)
    for account_id, delta in deltas:
        accounts.increment_balance(account_id, delta)
        logger.info(
            "Account balance reconciled after edit",
            extra={"account_id": account_id, "delta": str(delta)},
        )
    return deltas
