"""Account routes, including transfers between accounts."""

from __future__ import annotations

from ...extensions import current_user_id, get_ledger, success
from ...services import accounts as account_service
from ...services.transfers import transfer
from ..serializers import account_payload, account_to_dict, entry_to_dict, json_body, money
from . import bp


@bp.get("")
def list_accounts():
    listing = account_service.list_accounts(get_ledger(), user_id=current_user_id())
    return success(
        {
            "accounts": [account_to_dict(a) for a in listing.accounts],
            "totalBalance": money(listing.total_balance),
        }
    )


@bp.post("")
def create_account():
    user_id = current_user_id()
    payload = account_payload(json_body())
    account = account_service.create_account(
        get_ledger(),
        user_id=user_id,
        name=payload.get("name", ""),
        account_type=payload.get("account_type", ""),
        balance=payload.get("balance", 0),
    )
    return success({"account": account_to_dict(account)}, 201)


@bp.put("/<int:account_id>")
def update_account(account_id: int):
    user_id = current_user_id()
    account = account_service.update_account(
        get_ledger(), account_id, user_id=user_id, changes=account_payload(json_body())
    )
    return success({"account": account_to_dict(account)})


@bp.delete("/<int:account_id>")
def delete_account(account_id: int):
    account_service.delete_account(get_ledger(), account_id, user_id=current_user_id())
    return success({"message": "Account deleted successfully"})


@bp.post("/transfer")
def transfer_between_accounts():
    user_id = current_user_id()
    body = json_body()
    result = transfer(
        get_ledger(),
        user_id=user_id,
        from_account_id=body.get("fromAccountId"),
        to_account_id=body.get("toAccountId"),
        amount=body.get("amount"),
        occurred_on=body.get("date"),
        description=body.get("description"),
    )
    return success(
        {
            "message": "Transfer completed successfully",
            "fromTransaction": entry_to_dict(result.withdrawal),
            "toTransaction": entry_to_dict(result.deposit),
        },
        201,
    )
