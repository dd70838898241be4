"""CachedAccountRepository — read-through cache composed over an Accounts store."""

from collections.abc import Callable
from uuid import UUID

from src.wl_account.domain.cache import (
    ALL_ACCOUNTS_KEY,
    account_from_json,
    account_key,
    account_to_json,
    owner_accounts_key,
)
from src.wl_account.domain.models import Account
from src.wl_account.domain.repository import AccountRepositoryProtocol
from src.wl_common.cache import CachedStore, ReadThroughCache


def _dump_list(accounts: list[Account]) -> list[dict]:
    return [account_to_json(a) for a in accounts]


def _restore_list(data: list[dict]) -> list[Account]:
    return [account_from_json(d) for d in data]


class CachedAccountRepository(CachedStore):
    def __init__(
        self,
        inner: AccountRepositoryProtocol,
        cache: ReadThroughCache,
        bypass: Callable[[], bool] | None = None,
    ) -> None:
        super().__init__(cache, bypass)
        self._inner = inner

    async def add(self, account: Account) -> None:
        await self._inner.add(account)
        await self._invalidate(ALL_ACCOUNTS_KEY, owner_accounts_key(account.owner_id))

    async def get_by_id(self, account_number: UUID) -> Account | None:
        return await self._read_through(
            account_key(account_number),
            lambda: self._inner.get_by_id(account_number),
            account_to_json,
            account_from_json,
        )

    async def get_by_owner(self, owner_id: UUID) -> list[Account]:
        return await self._read_through(
            owner_accounts_key(owner_id),
            lambda: self._inner.get_by_owner(owner_id),
            _dump_list,
            _restore_list,
        )

    async def get_all(self) -> list[Account]:
        return await self._read_through(
            ALL_ACCOUNTS_KEY, self._inner.get_all, _dump_list, _restore_list
        )

    async def update(self, account: Account) -> None:
        await self._inner.update(account)
        await self._invalidate(*self._keys_for(account))

    async def delete(self, account: Account) -> None:
        await self._inner.delete(account)
        await self._invalidate(*self._keys_for(account))

    @staticmethod
    def _keys_for(account: Account) -> tuple[str, ...]:
        return (
            account_key(account.account_number),
            owner_accounts_key(account.owner_id),
            ALL_ACCOUNTS_KEY,
        )
