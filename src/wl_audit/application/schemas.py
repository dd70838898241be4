"""Pydantic view schemas for wl_audit."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from src.wl_audit.domain.models import AuditLog


class AuditLogView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    action_type: str
    status: str
    performed_by: UUID | None
    details: str
    created_at: datetime

    @classmethod
    def from_entry(cls, entry: AuditLog) -> "AuditLogView":
        return cls(
            id=entry.id,
            action_type=entry.action_type.name,
            status=entry.status.name,
            performed_by=entry.performed_by,
            details=entry.details,
            created_at=entry.created_at,
        )
