"""UserRepository — concrete implementation of UserRepositoryProtocol."""

from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_common.enums import UserRole
from src.wl_user.domain.models import User
from src.wl_user.infrastructure.db_models import UserORM


def _orm_to_user(row: UserORM) -> User:
    return User.restore(
        id=row.id,
        email=row.email,
        first_name=row.first_name,
        last_name=row.last_name,
        phone_number=row.phone_number,
        date_of_birth=row.date_of_birth,
        password_hash=row.password_hash,
        role=row.role,
        current_account_number=row.current_account_number,
        created_at=row.created_at,
    )


class UserRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, user: User) -> None:
        self._session.add(
            UserORM(
                id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                phone_number=user.phone_number,
                date_of_birth=user.date_of_birth,
                password_hash=user.password_hash,
                role=user.role,
                current_account_number=user.current_account_number,
                created_at=user.created_at,
            )
        )

    async def get_by_id(self, user_id: UUID) -> User | None:
        row = await self._session.get(UserORM, user_id, populate_existing=True)
        return _orm_to_user(row) if row is not None else None

    async def find_by_email(self, email: str) -> User | None:
        rows = await self._fetch(select(UserORM).where(UserORM.email == email.strip().lower()))
        return rows[0] if rows else None

    async def get_all(self) -> list[User]:
        return await self._fetch(select(UserORM).order_by(UserORM.created_at))

    async def get_all_customers(self) -> list[User]:
        return await self.get_by_role(UserRole.CUSTOMER)

    async def get_by_role(self, role: UserRole) -> list[User]:
        return await self._fetch(
            select(UserORM).where(UserORM.role == role).order_by(UserORM.created_at)
        )

    async def update(self, user: User) -> None:
        row = await self._tracked(user.id)
        row.first_name = user.first_name
        row.last_name = user.last_name
        row.phone_number = user.phone_number
        row.password_hash = user.password_hash
        row.current_account_number = user.current_account_number

    async def delete(self, user: User) -> None:
        await self._session.delete(await self._tracked(user.id))

    async def _fetch(self, stmt: Select) -> list[User]:
        result = await self._session.execute(stmt.execution_options(populate_existing=True))
        return [_orm_to_user(row) for row in result.scalars()]

    async def _tracked(self, user_id: UUID) -> UserORM:
        row = await self._session.get(UserORM, user_id)
        if row is None:
            raise LookupError(f"user {user_id} is not persisted")
        return row
