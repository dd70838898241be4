"""SQLAlchemy ORM models for wl_audit."""

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.wl_common.database import Base
from src.wl_common.enums import AuditLogActionType, AuditLogStatus


class AuditLogORM(Base):
    __tablename__ = "audit_logs"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    action_type: Mapped[AuditLogActionType] = mapped_column(
        Enum(AuditLogActionType, native_enum=False, length=32), nullable=False, index=True
    )
    status: Mapped[AuditLogStatus] = mapped_column(
        Enum(AuditLogStatus, native_enum=False, length=16), nullable=False
    )
    # No FK to users: the trail must outlive deleted users
    performed_by: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True), nullable=True, index=True)
    details: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
