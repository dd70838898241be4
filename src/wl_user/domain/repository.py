"""Users store Protocol."""

from typing import Protocol
from uuid import UUID

from src.wl_common.enums import UserRole
from src.wl_user.domain.models import User


class UserRepositoryProtocol(Protocol):
    async def add(self, user: User) -> None: ...

    async def get_by_id(self, user_id: UUID) -> User | None: ...

    async def find_by_email(self, email: str) -> User | None: ...

    async def get_all(self) -> list[User]: ...

    async def get_all_customers(self) -> list[User]: ...

    async def get_by_role(self, role: UserRole) -> list[User]: ...

    async def update(self, user: User) -> None: ...

    async def delete(self, user: User) -> None: ...
