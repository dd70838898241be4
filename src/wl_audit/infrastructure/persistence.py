"""AuditLogRepository — append-only implementation of AuditLogRepositoryProtocol."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.wl_audit.domain.models import AuditLog
from src.wl_audit.infrastructure.db_models import AuditLogORM
from src.wl_common.enums import AuditLogActionType

_TRANSACTION_TYPES = (AuditLogActionType.DEPOSIT, AuditLogActionType.TRANSFER)


def _orm_to_entry(row: AuditLogORM) -> AuditLog:
    return AuditLog(
        id=row.id,
        action_type=row.action_type,
        status=row.status,
        details=row.details,
        performed_by=row.performed_by,
        created_at=row.created_at,
    )


class AuditLogRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, entry: AuditLog) -> None:
        self._session.add(
            AuditLogORM(
                id=entry.id,
                action_type=entry.action_type,
                status=entry.status,
                details=entry.details,
                performed_by=entry.performed_by,
                created_at=entry.created_at,
            )
        )

    async def get_by_user(self, user_id: UUID) -> list[AuditLog]:
        return await self._fetch(select(AuditLogORM).where(AuditLogORM.performed_by == user_id))

    async def get_all(self) -> list[AuditLog]:
        return await self._fetch(select(AuditLogORM))

    async def get_by_action_type(self, action_type: AuditLogActionType) -> list[AuditLog]:
        return await self._fetch(select(AuditLogORM).where(AuditLogORM.action_type == action_type))

    async def get_by_time_range(self, begin: datetime, end: datetime) -> list[AuditLog]:
        return await self._fetch(
            select(AuditLogORM).where(AuditLogORM.created_at.between(begin, end))
        )

    async def get_transaction_history(self, user_id: UUID) -> list[AuditLog]:
        return await self._fetch(
            select(AuditLogORM).where(
                AuditLogORM.performed_by == user_id,
                AuditLogORM.action_type.in_(_TRANSACTION_TYPES),
            )
        )

    async def _fetch(self, stmt: Select) -> list[AuditLog]:
        result = await self._session.execute(stmt.order_by(AuditLogORM.created_at.desc()))
        return [_orm_to_entry(row) for row in result.scalars()]
