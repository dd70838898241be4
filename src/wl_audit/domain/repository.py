"""AuditLog store Protocol. Append-only: there is no update or delete.

All queries return entries newest first.
"""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.wl_audit.domain.models import AuditLog
from src.wl_common.enums import AuditLogActionType


class AuditLogRepositoryProtocol(Protocol):
    async def add(self, entry: AuditLog) -> None: ...

    async def get_by_user(self, user_id: UUID) -> list[AuditLog]: ...

    async def get_all(self) -> list[AuditLog]: ...

    async def get_by_action_type(self, action_type: AuditLogActionType) -> list[AuditLog]: ...

    async def get_by_time_range(self, begin: datetime, end: datetime) -> list[AuditLog]: ...

    async def get_transaction_history(self, user_id: UUID) -> list[AuditLog]: ...
