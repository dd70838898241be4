"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

Rows are tracked by the session's identity map. Domain objects handed out are
detached snapshots; ``update`` copies their state back onto the tracked row and the
unit of work flushes it on commit. The caller owns the transaction.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_account.domain.models import Account
from src.wl_account.infrastructure.db_models import AccountORM


def _orm_to_account(row: AccountORM) -> Account:
    return Account(
        account_number=row.account_number,
        owner_id=row.owner_id,
        is_active=row.is_active,
        balance=row.balance,
        created_at=row.created_at,
    )


class AccountRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, account: Account) -> None:
        self._session.add(
            AccountORM(
                account_number=account.account_number,
                owner_id=account.owner_id,
                is_active=account.is_active,
                balance=account.balance,
                created_at=account.created_at,
            )
        )

    async def get_by_id(self, account_number: UUID) -> Account | None:
        # populate_existing: a row cached by an earlier transaction must not be served stale
        row = await self._session.get(AccountORM, account_number, populate_existing=True)
        return _orm_to_account(row) if row is not None else None

    async def get_by_owner(self, owner_id: UUID) -> list[Account]:
        result = await self._session.execute(
            select(AccountORM)
            .where(AccountORM.owner_id == owner_id)
            .order_by(AccountORM.created_at)
            .execution_options(populate_existing=True)
        )
        return [_orm_to_account(row) for row in result.scalars()]

    async def get_all(self) -> list[Account]:
        result = await self._session.execute(
            select(AccountORM)
            .order_by(AccountORM.created_at)
            .execution_options(populate_existing=True)
        )
        return [_orm_to_account(row) for row in result.scalars()]

    async def update(self, account: Account) -> None:
        row = await self._tracked(account.account_number)
        row.is_active = account.is_active
        row.balance = account.balance

    async def delete(self, account: Account) -> None:
        row = await self._tracked(account.account_number)
        await self._session.delete(row)

    async def _tracked(self, account_number: UUID) -> AccountORM:
        # Identity-map hit when the account was loaded in this session
        row = await self._session.get(AccountORM, account_number)
        if row is None:
            raise LookupError(f"account {account_number} is not persisted")
        return row
