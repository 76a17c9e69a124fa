"""Input validation models."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledgerwise.errors import ValidationError
from ledgerwise.schemas import (
    AccountUpdate,
    EntryCreate,
    EntryUpdate,
    TransferRequest,
    coerce_datetime,
    validate_payload,
)

BASE = {
    "kind": "expense",
    "amount": "19.99",
    "category_id": 1,
    "occurred_on": "2026-03-18",
    "division": "personal",
}


def test_entry_create_parses_and_strips():
    payload = validate_payload(EntryCreate, {**BASE, "description": "  Lunch  "})
    assert payload.amount == Decimal("19.99")
    assert payload.occurred_on == datetime(2026, 3, 18)
    assert payload.description == "Lunch"
    assert payload.account_id is None


def test_validation_error_lists_fields():
    with pytest.raises(ValidationError) as excinfo:
        validate_payload(EntryCreate, {**BASE, "amount": "0", "division": "home"})
    fields = excinfo.value.details["fields"]
    assert set(fields) == {"amount", "division"}
    assert excinfo.value.to_dict()["code"] == "VALIDATION_ERROR"


def test_rounding_to_zero_is_rejected():
    with pytest.raises(ValidationError) as excinfo:
        validate_payload(EntryCreate, {**BASE, "amount": "0.004"})
    assert excinfo.value.details["fields"]["amount"] == ["Amount must be a positive number"]


def test_entry_update_tracks_supplied_fields_only():
    update = validate_payload(EntryUpdate, {"description": None, "account_id": None})
    assert update.changes() == {"description": None, "account_id": None}
    assert validate_payload(EntryUpdate, {}).changes() == {}


@pytest.mark.parametrize("field", ["kind", "amount", "category_id", "occurred_on", "division"])
def test_entry_update_rejects_explicit_null(field):
    with pytest.raises(ValidationError):
        validate_payload(EntryUpdate, {field: None})


def test_iso_timestamps_with_zone_become_naive_local():
    aware = datetime(2026, 3, 18, 12, 0, tzinfo=timezone.utc)
    parsed = coerce_datetime("2026-03-18T12:00:00Z")
    assert parsed.tzinfo is None
    assert parsed == aware.astimezone().replace(tzinfo=None)


def test_bad_date_string():
    with pytest.raises(ValueError):
        coerce_datetime("18/03/2026")


def test_transfer_request_keeps_sign_for_range_check():
    payload = validate_payload(
        TransferRequest,
        {"from_account_id": 1, "to_account_id": 2, "amount": "-5", "occurred_on": "2026-03-18"},
    )
    assert payload.amount == Decimal("-5.00")


def test_account_update_ignores_nulls():
    update = validate_payload(AccountUpdate, {"name": "Pocket", "balance": None})
    assert update.changes() == {"name": "Pocket"}
