"""Account cache keys and JSON codec for the read-through cache."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from src.wl_account.domain.models import Account

ALL_ACCOUNTS_KEY = "accounts:all"


def account_key(account_number: UUID) -> str:
    return f"account:id:{account_number}"


def owner_accounts_key(owner_id: UUID) -> str:
    return f"account:customer:{owner_id}"


def account_to_json(account: Account) -> dict[str, Any]:
    return {
        "account_number": str(account.account_number),
        "owner_id": str(account.owner_id),
        "is_active": account.is_active,
        "balance": str(account.balance),
        "created_at": account.created_at.isoformat(),
    }


def account_from_json(data: dict[str, Any]) -> Account:
    return Account(
        account_number=UUID(data["account_number"]),
        owner_id=UUID(data["owner_id"]),
        is_active=data["is_active"],
        balance=Decimal(data["balance"]),
        created_at=datetime.fromisoformat(data["created_at"]),
    )
