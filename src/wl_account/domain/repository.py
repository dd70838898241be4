"""Accounts store Protocol — dependency inversion for testability.

Unit tests inject an in-memory fake that conforms to this Protocol.
``update`` and ``delete`` only stage changes; the unit of work persists them.
"""

from typing import Protocol
from uuid import UUID

from src.wl_account.domain.models import Account


class AccountRepositoryProtocol(Protocol):
    async def add(self, account: Account) -> None: ...

    async def get_by_id(self, account_number: UUID) -> Account | None: ...

    async def get_by_owner(self, owner_id: UUID) -> list[Account]: ...

    async def get_all(self) -> list[Account]: ...

    async def update(self, account: Account) -> None: ...

    async def delete(self, account: Account) -> None: ...
