"""Pytest configuration and shared fixtures for LedgerWise tests.

Every test gets its own SQLite file under ``tmp_path``, a ledger context wired
to a frozen clock, an owner with the default Cash and Bank Account pair, and
the seeded default categories.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from sqlmodel import select

from ledgerwise.config import TestConfig
from ledgerwise.context import LedgerContext, create_ledger_context
from ledgerwise.infra.repositories import SQLModelAccountRepository
from ledgerwise.models import Budget, Category, Goal
from ledgerwise.services.categories import seed_default_categories
from ledgerwise.services.entries import create_entry
from ledgerwise.services.owners import register_owner

# Wednesday; the surrounding week runs Sunday 15th to Saturday 21st.
FROZEN_NOW = datetime(2026, 3, 18, 10, 0, 0)


class FrozenClock:
    """Clock that only moves when a test moves it.

    Local time equals UTC unless an offset is given.
    """

    def __init__(self, now: datetime, *, local_offset: timedelta = timedelta(0)):
        self.now = now
        self.local_offset = local_offset

    def utcnow(self) -> datetime:
        return self.now

    def localnow(self) -> datetime:
        return self.now + self.local_offset

    def advance(self, **kwargs) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


# =============================================================================
# Ledger Fixtures
# =============================================================================


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(FROZEN_NOW)


@pytest.fixture()
def config(tmp_path, monkeypatch: pytest.MonkeyPatch) -> TestConfig:
    monkeypatch.setenv("LEDGERWISE_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("LEDGERWISE_DATABASE_URL", f"sqlite:///{tmp_path / 'ledger.db'}")
    monkeypatch.setenv("LEDGERWISE_DEV_MODE", "true")
    monkeypatch.delenv("LEDGERWISE_EDIT_WINDOW_HOURS", raising=False)
    monkeypatch.delenv("LEDGERWISE_UNDO_WINDOW_SECONDS", raising=False)
    return TestConfig()


@pytest.fixture()
def ledger(config, clock) -> LedgerContext:
    """Ledger context on a fresh database with default categories seeded."""

    ctx = create_ledger_context(config, clock=clock)
    seed_default_categories(ctx)
    return ctx


@pytest.fixture()
def user(ledger):
    return register_owner(ledger, username="alice")


@pytest.fixture()
def other_user(ledger):
    return register_owner(ledger, username="bob")


@pytest.fixture()
def accounts(ledger, user) -> dict[str, int]:
    """Default account ids of ``user`` keyed by name."""

    with ledger.unit_of_work() as session:
        rows = SQLModelAccountRepository(session).list_active(user_id=user.id)
        return {account.name: account.id for account in rows}


@pytest.fixture()
def cash_id(accounts) -> int:
    return accounts["Cash"]


@pytest.fixture()
def bank_id(accounts) -> int:
    return accounts["Bank Account"]


def _default_category_id(ctx: LedgerContext, name: str) -> int:
    with ctx.unit_of_work() as session:
        statement = select(Category).where(Category.name == name).where(Category.is_default == True)  # noqa: E712
        return session.exec(statement).one().id


@pytest.fixture()
def food_id(ledger) -> int:
    return _default_category_id(ledger, "Food & Dining")


@pytest.fixture()
def travel_id(ledger) -> int:
    return _default_category_id(ledger, "Travel")


@pytest.fixture()
def salary_id(ledger) -> int:
    return _default_category_id(ledger, "Salary")


# =============================================================================
# Factories and helpers
# =============================================================================


@pytest.fixture()
def entry_factory(ledger, user, food_id, salary_id, clock):
    """Create entries for ``user`` with sensible defaults.

    ``kind="income"`` defaults to the Salary category, everything else to
    Food & Dining; ``occurred_on`` defaults to the frozen local time.
    """

    def _create(kind: str = "expense", amount="100", **overrides):
        owner_id = overrides.pop("user_id", user.id)
        data = {
            "kind": kind,
            "amount": amount,
            "category_id": salary_id if kind == "income" else food_id,
            "description": overrides.pop("description", f"{kind} entry"),
            "occurred_on": clock.localnow(),
            "division": "personal",
        }
        data.update(overrides)
        return create_entry(ledger, user_id=owner_id, data=data)

    return _create


@pytest.fixture()
def budget_factory(ledger, user):
    def _create(category_id: int, amount="1000", period: str = "monthly") -> Budget:
        with ledger.unit_of_work() as session:
            budget = Budget(
                user_id=user.id, category_id=category_id, amount=Decimal(str(amount)), period=period
            )
            session.add(budget)
            session.flush()
            session.refresh(budget)
            return budget

    return _create


@pytest.fixture()
def goal_factory(ledger, user):
    def _create(target="1000", current="0", **overrides) -> Goal:
        with ledger.unit_of_work() as session:
            goal = Goal(
                user_id=user.id,
                name=overrides.pop("name", "Emergency fund"),
                target_amount=Decimal(str(target)),
                current_amount=Decimal(str(current)),
                target_date=overrides.pop("target_date", FROZEN_NOW.date() + timedelta(days=30)),
                **overrides,
            )
            session.add(goal)
            session.flush()
            session.refresh(goal)
            return goal

    return _create


@pytest.fixture()
def balance(ledger, user):
    """Read an account's stored balance fresh from the database."""

    def _read(account_id: int, *, user_id: int | None = None) -> Decimal:
        with ledger.unit_of_work() as session:
            account = SQLModelAccountRepository(session).get_by_id(
                account_id, user_id=user_id or user.id, include_deleted=True
            )
            assert account is not None
            return Decimal(account.balance)

    return _read
