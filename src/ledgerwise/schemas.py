"""Input schemas for ledger operations.

Services validate caller input through these models before touching the
database; pydantic errors are surfaced as ``VALIDATION_ERROR`` failures.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

CENT = Decimal("0.01")

EntryKind = Literal["income", "expense"]
Division = Literal["personal", "office"]
AccountType = Literal["bank", "cash", "wallet"]
BudgetPeriod = Literal["weekly", "monthly"]

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def to_cents(value: Decimal) -> Decimal:
    """Round a money value to cents, half-up."""

    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def coerce_datetime(value: Any) -> Any:
    """Accept ``YYYY-MM-DD``, ISO 8601 strings, dates and datetimes.

    Aware datetimes are converted to naive local time, the frame period
    windows are computed in.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError("Invalid date format. Use YYYY-MM-DD or ISO 8601 format") from exc
    else:
        return value
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class _Schema(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class EntryCreate(_Schema):
    """Fields accepted when recording an income or expense."""

    kind: EntryKind
    amount: Decimal = Field(gt=0)
    category_id: int
    description: str = Field(default="", max_length=200)
    occurred_on: datetime
    division: Division
    account_id: Optional[int] = None

    @field_validator("occurred_on", mode="before")
    @classmethod
    def parse_occurred_on(cls, value: Any) -> Any:
        return coerce_datetime(value)

    @field_validator("amount")
    @classmethod
    def round_amount(cls, value: Decimal) -> Decimal:
        rounded = to_cents(value)
        if rounded <= 0:
            raise ValueError("Amount must be a positive number")
        return rounded


class EntryUpdate(_Schema):
    """Partial update; only fields present in ``model_fields_set`` apply."""

    kind: Optional[EntryKind] = None
    amount: Optional[Decimal] = Field(default=None, gt=0)
    category_id: Optional[int] = None
    description: Optional[str] = Field(default=None, max_length=200)
    occurred_on: Optional[datetime] = None
    division: Optional[Division] = None
    account_id: Optional[int] = None

    @field_validator("occurred_on", mode="before")
    @classmethod
    def parse_occurred_on(cls, value: Any) -> Any:
        return coerce_datetime(value)

    @field_validator("amount")
    @classmethod
    def round_amount(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return None
        rounded = to_cents(value)
        if rounded <= 0:
            raise ValueError("Amount must be a positive number")
        return rounded

    @field_validator("kind", "category_id", "occurred_on", "division", "amount")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        # Only account_id and description may be cleared explicitly.
        if value is None:
            raise ValueError("Field cannot be null")
        return value

    def changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class TransferRequest(_Schema):
    """Shape of a transfer; range rules are checked by the orchestrator."""

    from_account_id: int
    to_account_id: int
    amount: Decimal
    description: Optional[str] = Field(default=None, max_length=200)
    occurred_on: datetime

    @field_validator("occurred_on", mode="before")
    @classmethod
    def parse_occurred_on(cls, value: Any) -> Any:
        return coerce_datetime(value)

    @field_validator("amount")
    @classmethod
    def round_amount(cls, value: Decimal) -> Decimal:
        return to_cents(value)


class AccountCreate(_Schema):
    name: str = Field(min_length=1, max_length=50)
    account_type: AccountType
    balance: Decimal = Decimal("0")

    @field_validator("balance")
    @classmethod
    def round_balance(cls, value: Decimal) -> Decimal:
        return to_cents(value)


class AccountUpdate(_Schema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    account_type: Optional[AccountType] = None
    balance: Optional[Decimal] = None

    @field_validator("balance")
    @classmethod
    def round_balance(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        return None if value is None else to_cents(value)

    def changes(self) -> dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }


class BudgetSet(_Schema):
    category_id: int
    amount: Decimal = Field(ge=0)
    period: BudgetPeriod = "monthly"

    @field_validator("amount")
    @classmethod
    def round_amount(cls, value: Decimal) -> Decimal:
        return to_cents(value)


class GoalContribution(_Schema):
    amount: Decimal

    @field_validator("amount")
    @classmethod
    def positive(cls, value: Decimal) -> Decimal:
        rounded = to_cents(value)
        if rounded <= 0:
            raise ValueError("Amount must be a positive number")
        return rounded


def validate_payload(schema: Type[SchemaT], data: Mapping[str, Any]) -> SchemaT:
    """Validate ``data`` against ``schema`` or raise ``ValidationError``."""

    try:
        return schema.model_validate(dict(data))
    except PydanticValidationError as exc:
        structured: dict[str, list[str]] = {}
        for error in exc.errors(include_url=False):
            loc = error.get("loc", ())
            key = str(loc[0]) if loc else "__root__"
            msg = error.get("msg", "Invalid value")
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            structured.setdefault(key, []).append(msg)
        message = ", ".join(
            f"{field}: {msgs[0]}" for field, msgs in sorted(structured.items())
        )
        raise ValidationError(message, details={"fields": structured}) from exc


__all__ = [
    "AccountCreate",
    "AccountUpdate",
    "BudgetSet",
    "EntryCreate",
    "EntryUpdate",
    "GoalContribution",
    "TransferRequest",
    "coerce_datetime",
    "to_cents",
    "validate_payload",
]
