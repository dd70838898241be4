"""AuditLogService — records the outcome of every sensitive action.

Mutating services wrap their work in ``recording()``. The recorder runs on every
exit path after the business transaction has been committed or rolled back, so the
audit write never participates in (and is never lost to) that transaction.

An audit write that fails is never raised in place of the business outcome. It is
reported at CRITICAL on the ``wl.audit.alert`` logger, which operations alerting
subscribes to.
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.wl_audit.application.schemas import AuditLogView
from src.wl_audit.domain.models import AuditLog
from src.wl_common.datetime_utils import ensure_utc
from src.wl_common.enums import AuditLogActionType
from src.wl_common.errors import InvalidTimeRangeError
from src.wl_common.money import format_amount
from src.wl_common.unit_of_work import UnitOfWork

alert_logger = logging.getLogger("wl.audit.alert")


@dataclass
class AuditOutcome:
    """Mutable outcome handed to the body of a ``recording()`` block."""

    succeeded: bool = False
    performed_by: UUID | None = None


Recorder = Callable[[AuditOutcome], Awaitable[None]]


class AuditLogService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    # ------------------------------------------------------------------
    # Outcome recorders
    # ------------------------------------------------------------------

    async def log_action(self, entry: AuditLog, save_immediately: bool = True) -> None:
        await self._uow.audit_logs.add(entry)
        if save_immediately:
            await self._uow.save_changes()

    async def log_transfer_outcome(
        self,
        performed_by: UUID | None,
        from_account: UUID,
        to_account: UUID,
        amount: Decimal,
        success: bool,
    ) -> None:
        verb = "Transferred" if success else "Failed to transfer"
        details = f"{verb} {format_amount(amount)} from account {from_account} to account {to_account}"
        await self.log_action(
            AuditLog.record(AuditLogActionType.TRANSFER, success, details, performed_by)
        )

    async def log_deposit_outcome(
        self,
        performed_by: UUID | None,
        to_account: UUID,
        amount: Decimal,
        success: bool,
    ) -> None:
        verb = "Deposited" if success else "Failed to deposit"
        details = f"{verb} {format_amount(amount)} to account {to_account}"
        await self.log_action(
            AuditLog.record(AuditLogActionType.DEPOSIT, success, details, performed_by)
        )

    @asynccontextmanager
    async def recording(
        self, record: Recorder, performed_by: UUID | None = None
    ) -> AsyncIterator[AuditOutcome]:
        """Run ``record(outcome)`` on every exit path of the block.

        The block sets ``outcome.succeeded = True`` as its last statement. On failure,
        tracked entity changes are discarded first so the audit save starts clean.
        """
        outcome = AuditOutcome(performed_by=performed_by)
        try:
            yield outcome
        finally:
            if not outcome.succeeded:
                self._uow.discard_tracked()
            try:
                await record(outcome)
            except Exception:
                alert_logger.critical(
                    "AUDIT WRITE FAILED: outcome=%s performed_by=%s",
                    "SUCCESS" if outcome.succeeded else "FAILED",
                    outcome.performed_by,
                    exc_info=True,
                )
                self._uow.discard_tracked()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_user_logs(self, user_id: UUID) -> list[AuditLogView]:
        return _views(await self._uow.audit_logs.get_by_user(user_id))

    async def get_all_logs(self) -> list[AuditLogView]:
        return _views(await self._uow.audit_logs.get_all())

    async def get_logs_by_action_type(self, action_type: AuditLogActionType) -> list[AuditLogView]:
        return _views(await self._uow.audit_logs.get_by_action_type(action_type))

    async def get_logs_by_time_range(self, begin: datetime, end: datetime) -> list[AuditLogView]:
        begin, end = ensure_utc(begin), ensure_utc(end)
        if begin > end:
            raise InvalidTimeRangeError()
        return _views(await self._uow.audit_logs.get_by_time_range(begin, end))

    async def get_transaction_history(self, user_id: UUID) -> list[AuditLogView]:
        return _views(await self._uow.audit_logs.get_transaction_history(user_id))


def _views(entries: list[AuditLog]) -> list[AuditLogView]:
    return [AuditLogView.from_entry(e) for e in entries]
