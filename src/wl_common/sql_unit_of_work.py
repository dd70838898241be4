"""SqlAlchemyUnitOfWork — UnitOfWork over an AsyncSession.

Stores are constructed eagerly. When a ReadThroughCache is supplied, each store is
wrapped in its caching adapter; the adapters serve cached reads only while no
transaction is open, and re-invalidate written keys after every successful commit.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

from src.wl_account.infrastructure.cached import CachedAccountRepository
from src.wl_account.infrastructure.persistence import AccountRepository
from src.wl_audit.infrastructure.cached import CachedAuditLogRepository
from src.wl_audit.infrastructure.persistence import AuditLogRepository
from src.wl_common.cache import CachedStore, ReadThroughCache
from src.wl_common.database import async_session_factory
from src.wl_common.enums import IsolationLevel
from src.wl_common.errors import NoActiveTransactionError, TransactionAlreadyActiveError
from src.wl_common.redis_client import get_cache
from src.wl_common.unit_of_work import UnitOfWork
from src.wl_user.infrastructure.cached import CachedUserRepository
from src.wl_user.infrastructure.persistence import UserRepository

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession, cache: ReadThroughCache | None = None) -> None:
        self._session = session
        self._transaction: AsyncSessionTransaction | None = None
        self._cached_stores: list[CachedStore] = []

        accounts = AccountRepository(session)
        users = UserRepository(session)
        audit_logs = AuditLogRepository(session)
        if cache is None:
            self.accounts, self.users, self.audit_logs = accounts, users, audit_logs
            return

        def bypass() -> bool:
            return self.in_transaction

        self.accounts = CachedAccountRepository(accounts, cache, bypass)
        self.users = CachedUserRepository(users, cache, bypass)
        self.audit_logs = CachedAuditLogRepository(audit_logs, cache, bypass)
        self._cached_stores = [self.accounts, self.users, self.audit_logs]

    @property
    def in_transaction(self) -> bool:
        return self._transaction is not None

    async def begin_transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> None:
        if self._transaction is not None:
            raise TransactionAlreadyActiveError()
        if self._session.in_transaction():
            # Close the autobegun read transaction so the isolation level applies
            await self._session.commit()
        self._transaction = await self._session.begin()
        # Must run before any statement in the transaction
        await self._session.connection(execution_options={"isolation_level": isolation_level.value})
        logger.debug("Transaction begun at %s", isolation_level.value)

    async def commit(self) -> None:
        if self._transaction is None:
            raise NoActiveTransactionError()
        await self._session.flush()
        await self._transaction.commit()
        self._transaction = None
        await self._invalidate_written()

    async def rollback(self) -> None:
        if self._transaction is None:
            return
        transaction, self._transaction = self._transaction, None
        await transaction.rollback()
        logger.debug("Transaction rolled back")

    def discard_tracked(self) -> None:
        self._session.expunge_all()

    async def save_changes(self) -> None:
        if self._transaction is not None:
            await self._session.flush()
            return
        try:
            await self._session.commit()
        except Exception:
            await self._session.rollback()
            raise
        await self._invalidate_written()

    async def _invalidate_written(self) -> None:
        for store in self._cached_stores:
            await store.invalidate_written()


@asynccontextmanager
async def open_unit_of_work() -> AsyncIterator[SqlAlchemyUnitOfWork]:
    """Session-per-request unit of work, wired to the shared cache when enabled."""
    async with async_session_factory() as session:
        yield SqlAlchemyUnitOfWork(session, await get_cache())
