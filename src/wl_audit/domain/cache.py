"""Audit log cache keys and JSON codec.

Time-range queries are not cached: their key space is unbounded and cannot be
invalidated on append.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from src.wl_audit.domain.models import AuditLog
from src.wl_common.enums import AuditLogActionType, AuditLogStatus

ALL_LOGS_KEY = "auditLogs:all"


def user_logs_key(user_id: UUID) -> str:
    return f"auditLogs:user:{user_id}"


def action_type_key(action_type: AuditLogActionType) -> str:
    return f"auditLogs:type:{action_type.name}"


def history_key(user_id: UUID) -> str:
    return f"auditLogs:history:{user_id}"


def entry_to_json(entry: AuditLog) -> dict[str, Any]:
    return {
        "id": str(entry.id),
        "action_type": entry.action_type.name,
        "status": entry.status.name,
        "details": entry.details,
        "performed_by": str(entry.performed_by) if entry.performed_by else None,
        "created_at": entry.created_at.isoformat(),
    }


def entry_from_json(data: dict[str, Any]) -> AuditLog:
    return AuditLog(
        id=UUID(data["id"]),
        action_type=AuditLogActionType[data["action_type"]],
        status=AuditLogStatus[data["status"]],
        details=data["details"],
        performed_by=UUID(data["performed_by"]) if data["performed_by"] else None,
        created_at=datetime.fromisoformat(data["created_at"]),
    )
