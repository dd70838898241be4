"""Pydantic schemas for wl_account."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel

from src.wl_account.domain.models import Account
from src.wl_common.money import format_amount


class AccountView(BaseModel):
    account_number: UUID
    owner_id: UUID
    is_active: bool
    balance: Decimal
    balance_display: str
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "AccountView":
        return cls(
            account_number=account.account_number,
            owner_id=account.owner_id,
            is_active=account.is_active,
            balance=account.balance,
            balance_display=format_amount(account.balance),
            created_at=account.created_at,
        )


class BalanceView(BaseModel):
    account_number: UUID
    balance: Decimal
    balance_display: str


class TransferResult(BaseModel):
    from_account: UUID
    to_account: UUID
    amount: Decimal
    from_balance_after: Decimal
    message: str


class DepositResult(BaseModel):
    to_account: UUID
    amount: Decimal
    balance_after: Decimal
    message: str
