"""Transfer orchestration: symmetry, linking, preconditions and atomicity."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from ledgerwise.errors import InternalError, NotFoundError, ValidationError
from ledgerwise.infra.repositories import SQLModelAccountRepository
from ledgerwise.models import Category, LedgerEntry
from ledgerwise.services.accounts import create_account, delete_account
from ledgerwise.services.entries import delete_entry, restore_entry, update_entry
from ledgerwise.services.transfers import transfer


def _all_entries(ledger) -> list[LedgerEntry]:
    with ledger.unit_of_work() as session:
        return list(session.exec(select(LedgerEntry)).all())


def test_transfer_moves_money_and_links_legs(ledger, user, cash_id, bank_id, balance):
    result = transfer(
        ledger, user_id=user.id, from_account_id=cash_id, to_account_id=bank_id, amount="250"
    )

    assert balance(cash_id) == Decimal("-250")
    assert balance(bank_id) == Decimal("250")

    withdrawal, deposit = result.withdrawal, result.deposit
    assert withdrawal.kind == deposit.kind == "transfer"
    assert withdrawal.transfer_leg == "withdrawal"
    assert deposit.transfer_leg == "deposit"
    assert withdrawal.linked_entry_id == deposit.id
    assert deposit.linked_entry_id == withdrawal.id
    assert withdrawal.amount == deposit.amount == Decimal("250")
    assert withdrawal.account_id == cash_id and deposit.account_id == bank_id
    assert withdrawal.description == "Transfer to Bank Account"
    assert deposit.description == "Transfer from Cash"
    assert withdrawal.division == deposit.division == "personal"


def test_transfer_uses_the_shared_transfer_category(ledger, user, cash_id, bank_id):
    first = transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=bank_id, amount="1")
    second = transfer(ledger, user_id=user.id, from_account_id=bank_id, to_account_id=cash_id, amount="1")

    with ledger.unit_of_work() as session:
        rows = session.exec(select(Category).where(Category.system_key == "transfer")).all()
    assert len(rows) == 1
    assert first.withdrawal.category_id == second.deposit.category_id == rows[0].id


def test_transfer_allows_overdraft(ledger, user, cash_id, bank_id, entry_factory, balance):
    entry_factory("income", "500", account_id=cash_id)

    transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=bank_id, amount="1000")

    assert balance(cash_id) == Decimal("-500")
    assert balance(bank_id) == Decimal("1000")


def test_custom_description_is_used_on_both_legs(ledger, user, cash_id, bank_id):
    result = transfer(
        ledger,
        user_id=user.id,
        from_account_id=cash_id,
        to_account_id=bank_id,
        amount="10",
        description="Rent pot",
        occurred_on="2026-03-17",
    )
    assert result.withdrawal.description == result.deposit.description == "Rent pot"
    assert result.deposit.occurred_on.date().isoformat() == "2026-03-17"


def test_missing_account_wins_over_other_failures(ledger, user, cash_id):
    with pytest.raises(NotFoundError) as excinfo:
        transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=9999, amount="-1")
    assert excinfo.value.message == "One or both accounts not found"


def test_same_account_checked_before_amount(ledger, user, cash_id):
    with pytest.raises(ValidationError) as excinfo:
        transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=cash_id, amount="0")
    assert excinfo.value.message == "Cannot transfer to the same account"


def test_non_positive_amount_rejected(ledger, user, cash_id, bank_id):
    with pytest.raises(ValidationError):
        transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=bank_id, amount="0")
    assert _all_entries(ledger) == []


def test_foreign_or_deleted_accounts_are_not_found(ledger, user, other_user, cash_id, bank_id):
    with pytest.raises(NotFoundError):
        transfer(ledger, user_id=other_user.id, from_account_id=cash_id, to_account_id=bank_id, amount="5")

    wallet = create_account(ledger, user_id=user.id, name="Wallet", account_type="wallet")
    delete_account(ledger, wallet.id, user_id=user.id)
    with pytest.raises(NotFoundError):
        transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=wallet.id, amount="5")


@pytest.mark.parametrize("fail_on_call", [1, 2])
def test_failure_midway_leaves_no_trace(ledger, user, cash_id, bank_id, balance, monkeypatch, fail_on_call):
    original = SQLModelAccountRepository.increment_balance
    calls = {"count": 0}

    def flaky_increment(self, account_id, delta):
        calls["count"] += 1
        if calls["count"] == fail_on_call:
            raise OperationalError("UPDATE account", {}, Exception("database is locked"))
        return original(self, account_id, delta)

    monkeypatch.setattr(SQLModelAccountRepository, "increment_balance", flaky_increment)

    with pytest.raises(InternalError) as excinfo:
        transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=bank_id, amount="300")
    assert excinfo.value.code == "SERVER_ERROR"

    monkeypatch.setattr(SQLModelAccountRepository, "increment_balance", original)
    assert _all_entries(ledger) == []
    assert balance(cash_id) == Decimal("0")
    assert balance(bank_id) == Decimal("0")


def test_deleting_one_leg_removes_whole_transfer(ledger, user, cash_id, bank_id, balance, clock):
    result = transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=bank_id, amount="80")

    delete_entry(ledger, result.deposit.id, user_id=user.id)
    assert balance(cash_id) == Decimal("0")
    assert balance(bank_id) == Decimal("0")
    assert all(entry.is_deleted for entry in _all_entries(ledger))

    clock.advance(seconds=5)
    restore_entry(ledger, result.withdrawal.id, user_id=user.id)
    assert balance(cash_id) == Decimal("-80")
    assert balance(bank_id) == Decimal("80")
    assert not any(entry.is_deleted for entry in _all_entries(ledger))


def test_transfer_legs_only_accept_description_and_date(ledger, user, cash_id, bank_id, balance):
    result = transfer(ledger, user_id=user.id, from_account_id=cash_id, to_account_id=bank_id, amount="80")

    updated = update_entry(
        ledger, result.withdrawal.id, user_id=user.id, changes={"description": "Savings sweep"}
    )
    assert updated.description == "Savings sweep"

    with pytest.raises(ValidationError):
        update_entry(ledger, result.withdrawal.id, user_id=user.id, changes={"amount": "10"})
    assert balance(cash_id) == Decimal("-80")


@pytest.mark.parametrize("edited_leg", ["withdrawal", "deposit"])
def test_date_edit_moves_both_legs(ledger, user, cash_id, bank_id, edited_leg):
    result = transfer(
        ledger,
        user_id=user.id,
        from_account_id=cash_id,
        to_account_id=bank_id,
        amount="40",
        occurred_on=datetime(2026, 3, 3, 9, 0),
    )
    leg = getattr(result, edited_leg)
    update_entry(ledger, leg.id, user_id=user.id, changes={"occurred_on": "2026-03-10"})

    legs = {entry.transfer_leg: entry for entry in _all_entries(ledger)}
    assert legs["withdrawal"].occurred_on == datetime(2026, 3, 10)
    assert legs["deposit"].occurred_on == datetime(2026, 3, 10)
    assert legs["withdrawal"].description == "Transfer to Bank Account"
    assert legs["deposit"].description == "Transfer from Cash"
