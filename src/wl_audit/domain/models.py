"""Domain models for wl_audit — immutable once written; the store is append-only."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4

from src.wl_common.datetime_utils import utc_now
from src.wl_common.enums import AuditLogActionType, AuditLogStatus


@dataclass
class AuditLog:
    action_type: AuditLogActionType
    status: AuditLogStatus
    details: str
    performed_by: UUID | None = None
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utc_now)

    @classmethod
    def record(
        cls,
        action_type: AuditLogActionType,
        succeeded: bool,
        details: str,
        performed_by: UUID | None = None,
    ) -> "AuditLog":
        return cls(
            action_type=action_type,
            status=AuditLogStatus.SUCCESS if succeeded else AuditLogStatus.FAILED,
            details=details,
            performed_by=performed_by,
        )

    @property
    def succeeded(self) -> bool:
        return self.status is AuditLogStatus.SUCCESS
