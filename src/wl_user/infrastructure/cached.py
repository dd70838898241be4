"""CachedUserRepository — read-through cache composed over a Users store."""

from collections.abc import Callable
from uuid import UUID

from src.wl_common.cache import CachedStore, ReadThroughCache
from src.wl_common.enums import UserRole
from src.wl_user.domain.cache import (
    CUSTOMERS_KEY,
    email_key,
    user_from_json,
    user_key,
    user_to_json,
)
from src.wl_user.domain.models import User
from src.wl_user.domain.repository import UserRepositoryProtocol


class CachedUserRepository(CachedStore):
    def __init__(
        self,
        inner: UserRepositoryProtocol,
        cache: ReadThroughCache,
        bypass: Callable[[], bool] | None = None,
    ) -> None:
        super().__init__(cache, bypass)
        self._inner = inner

    async def add(self, user: User) -> None:
        await self._inner.add(user)
        await self._invalidate(*self._keys_for(user))

    async def get_by_id(self, user_id: UUID) -> User | None:
        return await self._read_through(
            user_key(user_id), lambda: self._inner.get_by_id(user_id), user_to_json, user_from_json
        )

    async def find_by_email(self, email: str) -> User | None:
        return await self._read_through(
            email_key(email), lambda: self._inner.find_by_email(email), user_to_json, user_from_json
        )

    async def get_all(self) -> list[User]:
        return await self._inner.get_all()

    async def get_all_customers(self) -> list[User]:
        return await self._read_through(
            CUSTOMERS_KEY,
            self._inner.get_all_customers,
            lambda users: [user_to_json(u) for u in users],
            lambda data: [user_from_json(d) for d in data],
        )

    async def get_by_role(self, role: UserRole) -> list[User]:
        return await self._inner.get_by_role(role)

    async def update(self, user: User) -> None:
        await self._inner.update(user)
        await self._invalidate(*self._keys_for(user))

    async def delete(self, user: User) -> None:
        await self._inner.delete(user)
        await self._invalidate(*self._keys_for(user))

    @staticmethod
    def _keys_for(user: User) -> tuple[str, ...]:
        return (user_key(user.id), email_key(user.email), CUSTOMERS_KEY)
