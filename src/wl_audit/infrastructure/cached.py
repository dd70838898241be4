"""CachedAuditLogRepository — read-through cache composed over an AuditLog store."""

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

from src.wl_audit.domain.cache import (
    ALL_LOGS_KEY,
    action_type_key,
    entry_from_json,
    entry_to_json,
    history_key,
    user_logs_key,
)
from src.wl_audit.domain.models import AuditLog
from src.wl_audit.domain.repository import AuditLogRepositoryProtocol
from src.wl_common.cache import CachedStore, ReadThroughCache
from src.wl_common.enums import AuditLogActionType


def _dump(entries: list[AuditLog]) -> list[dict]:
    return [entry_to_json(e) for e in entries]


def _restore(data: list[dict]) -> list[AuditLog]:
    return [entry_from_json(d) for d in data]


class CachedAuditLogRepository(CachedStore):
    def __init__(
        self,
        inner: AuditLogRepositoryProtocol,
        cache: ReadThroughCache,
        bypass: Callable[[], bool] | None = None,
    ) -> None:
        super().__init__(cache, bypass)
        self._inner = inner

    async def add(self, entry: AuditLog) -> None:
        await self._inner.add(entry)
        keys = [ALL_LOGS_KEY, action_type_key(entry.action_type)]
        if entry.performed_by is not None:
            keys += [user_logs_key(entry.performed_by), history_key(entry.performed_by)]
        await self._invalidate(*keys)

    async def get_by_user(self, user_id: UUID) -> list[AuditLog]:
        return await self._read_through(
            user_logs_key(user_id), lambda: self._inner.get_by_user(user_id), _dump, _restore
        )

    async def get_all(self) -> list[AuditLog]:
        return await self._read_through(ALL_LOGS_KEY, self._inner.get_all, _dump, _restore)

    async def get_by_action_type(self, action_type: AuditLogActionType) -> list[AuditLog]:
        return await self._read_through(
            action_type_key(action_type),
            lambda: self._inner.get_by_action_type(action_type),
            _dump,
            _restore,
        )

    async def get_by_time_range(self, begin: datetime, end: datetime) -> list[AuditLog]:
        return await self._inner.get_by_time_range(begin, end)

    async def get_transaction_history(self, user_id: UUID) -> list[AuditLog]:
        return await self._read_through(
            history_key(user_id),
            lambda: self._inner.get_transaction_history(user_id),
            _dump,
            _restore,
        )
