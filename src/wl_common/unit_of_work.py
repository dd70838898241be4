"""Unit-of-Work contract.

One unit of work owns one session, the three stores built on it, and at most one
explicit transaction:

    Idle --begin_transaction--> Active --commit/rollback--> Idle

A unit of work is not safe for concurrent use; each request gets its own.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from src.wl_account.domain.repository import AccountRepositoryProtocol
from src.wl_audit.domain.repository import AuditLogRepositoryProtocol
from src.wl_common.enums import IsolationLevel
from src.wl_user.domain.repository import UserRepositoryProtocol


class UnitOfWork(ABC):
    accounts: AccountRepositoryProtocol
    users: UserRepositoryProtocol
    audit_logs: AuditLogRepositoryProtocol

    @property
    @abstractmethod
    def in_transaction(self) -> bool: ...

    @abstractmethod
    async def begin_transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> None:
        """Open a transaction. Raises TransactionAlreadyActiveError if one is open."""

    @abstractmethod
    async def commit(self) -> None:
        """Flush pending changes and commit. Raises NoActiveTransactionError if idle."""

    @abstractmethod
    async def rollback(self) -> None:
        """Roll back the open transaction; no-op when idle."""

    @abstractmethod
    def discard_tracked(self) -> None:
        """Drop all pending in-memory entity changes without touching the transaction."""

    @abstractmethod
    async def save_changes(self) -> None:
        """Flush inside a transaction, otherwise persist immediately (auto-commit)."""

    @asynccontextmanager
    async def transaction(
        self, isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    ) -> AsyncIterator[None]:
        """Join the open transaction, or own a new one for the duration of the block.

        An owned transaction commits on normal exit; on any error (cancellation
        included) it is rolled back and tracked changes are discarded.
        """
        if self.in_transaction:
            yield
            return
        await self.begin_transaction(isolation_level)
        try:
            yield
            await self.commit()
        except BaseException:
            await self.rollback()
            self.discard_tracked()
            raise
