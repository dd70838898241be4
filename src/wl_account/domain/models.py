"""Domain models for wl_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from uuid import UUID, uuid4

from src.wl_common.datetime_utils import utc_now
from src.wl_common.errors import InsufficientFundsError, InvalidAmountError
from src.wl_common.money import is_valid_amount


@dataclass
class Account:
    """A wallet account. ``balance`` only moves through deposit/withdraw and never goes below zero."""

    owner_id: UUID
    account_number: UUID = field(default_factory=uuid4)
    is_active: bool = True
    balance: Decimal = Decimal("0.00")
    created_at: datetime = field(default_factory=utc_now)

    def deposit(self, amount: Decimal) -> None:
        if not is_valid_amount(amount):
            raise InvalidAmountError(amount)
        self.balance += amount

    def withdraw(self, amount: Decimal) -> None:
        if not is_valid_amount(amount):
            raise InvalidAmountError(amount)
        if amount > self.balance:
            raise InsufficientFundsError(amount, self.balance)
        self.balance -= amount

    @property
    def has_balance(self) -> bool:
        return self.balance != 0
