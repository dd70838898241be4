"""AccountService — owns transaction boundaries for every balance and state change.

Transfers and deposits:
  - validate input before any transaction (not audited),
  - run at SERIALIZABLE isolation, which is the only concurrency control,
  - roll back on any failure, cancellation included,
  - record their outcome through AuditLogService after the transaction resolves.

Business errors propagate unchanged; anything else is wrapped as InfrastructureError.
Activation, deactivation and deletion join the caller's transaction when one is open.
"""

import logging
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.wl_account.application.schemas import (
    AccountView,
    BalanceView,
    DepositResult,
    TransferResult,
)
from src.wl_account.domain.models import Account
from src.wl_audit.application.service import AuditLogService, AuditOutcome
from src.wl_audit.domain.models import AuditLog
from src.wl_common.datetime_utils import utc_now
from src.wl_common.enums import AuditLogActionType, IsolationLevel
from src.wl_common.errors import (
    AccountActiveError,
    AccountInactiveError,
    AccountNotFoundError,
    AlreadyActiveError,
    AlreadyInactiveError,
    InvalidAmountError,
    NonZeroBalanceError,
    SameAccountTransferError,
    translate_errors,
)
from src.wl_common.money import format_amount, is_valid_amount
from src.wl_common.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, uow: UnitOfWork, audit: AuditLogService | None = None) -> None:
        self._uow = uow
        self._audit = audit or AuditLogService(uow)

    # ------------------------------------------------------------------
    # Money movement
    # ------------------------------------------------------------------

    async def transfer(
        self,
        from_account: UUID,
        to_account: UUID,
        amount: Decimal,
        *,
        performed_by: UUID | None = None,
    ) -> TransferResult:
        if not is_valid_amount(amount):
            raise InvalidAmountError(amount)
        if from_account == to_account:
            raise SameAccountTransferError()

        async def record(outcome: AuditOutcome) -> None:
            await self._audit.log_transfer_outcome(
                outcome.performed_by, from_account, to_account, amount, outcome.succeeded
            )

        async with self._audit.recording(record, performed_by) as outcome:
            with translate_errors(
                f"Failed to transfer {format_amount(amount)} from account {from_account} "
                f"to account {to_account}"
            ):
                await self._uow.begin_transaction(IsolationLevel.SERIALIZABLE)
                try:
                    source = await self._uow.accounts.get_by_id(from_account)
                    destination = await self._uow.accounts.get_by_id(to_account)
                    if source is None:
                        raise AccountNotFoundError(from_account)
                    outcome.performed_by = source.owner_id
                    if destination is None:
                        raise AccountNotFoundError(to_account)
                    _require_active(source)
                    _require_active(destination)

                    source.withdraw(amount)
                    destination.deposit(amount)
                    await self._uow.accounts.update(source)
                    await self._uow.accounts.update(destination)
                    await self._uow.commit()
                except BaseException:
                    await self._uow.rollback()
                    raise
            outcome.succeeded = True

        logger.info("Transfer %s -> %s of %s committed", from_account, to_account, amount)
        return TransferResult(
            from_account=from_account,
            to_account=to_account,
            amount=amount,
            from_balance_after=source.balance,
            message=f"Transferred {format_amount(amount)} to account {to_account}",
        )

    async def deposit(self, performed_by: UUID | None, to_account: UUID, amount: Decimal) -> DepositResult:
        if not is_valid_amount(amount):
            raise InvalidAmountError(amount)

        async def record(outcome: AuditOutcome) -> None:
            await self._audit.log_deposit_outcome(
                outcome.performed_by, to_account, amount, outcome.succeeded
            )

        async with self._audit.recording(record, performed_by) as outcome:
            with translate_errors(
                f"Failed to deposit {format_amount(amount)} to account {to_account}"
            ):
                await self._uow.begin_transaction(IsolationLevel.SERIALIZABLE)
                try:
                    account = await self._uow.accounts.get_by_id(to_account)
                    if account is None:
                        raise AccountNotFoundError(to_account)
                    _require_active(account)
                    account.deposit(amount)
                    await self._uow.accounts.update(account)
                    await self._uow.commit()
                except BaseException:
                    await self._uow.rollback()
                    raise
            outcome.succeeded = True

        logger.info("Deposit to %s of %s committed", to_account, amount)
        return DepositResult(
            to_account=to_account,
            amount=amount,
            balance_after=account.balance,
            message=f"Deposited {format_amount(amount)} to account {to_account}",
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def create_account(
        self, owner_id: UUID, *, created_at: datetime | None = None
    ) -> AccountView:
        account = Account(owner_id=owner_id, created_at=created_at or utc_now())

        async def record(outcome: AuditOutcome) -> None:
            details = (
                f"Created account {account.account_number} for customer {owner_id}"
                if outcome.succeeded
                else f"Failed to create account for customer {owner_id}"
            )
            await self._audit.log_action(
                AuditLog.record(
                    AuditLogActionType.CUSTOMER_ACCOUNT_CREATION,
                    outcome.succeeded,
                    details,
                    owner_id,
                )
            )

        async with self._audit.recording(record, owner_id) as outcome:
            with translate_errors(f"Failed to create account for customer {owner_id}"):
                async with self._uow.transaction():
                    await self._uow.accounts.add(account)
            outcome.succeeded = True
        return AccountView.from_account(account)

    async def activate_account(self, account_number: UUID) -> AccountView:
        async with self._uow.transaction():
            account = await self._load(account_number)
            if account.is_active:
                raise AlreadyActiveError(account_number)
            account.is_active = True
            await self._uow.accounts.update(account)
        return AccountView.from_account(account)

    async def deactivate_account(self, account_number: UUID) -> AccountView:
        async with self._uow.transaction():
            account = await self._load(account_number)
            if not account.is_active:
                raise AlreadyInactiveError(account_number)
            if account.balance > 0:
                raise NonZeroBalanceError(
                    f"Cannot deactivate account {account_number} with a balance of "
                    f"{format_amount(account.balance)}"
                )
            account.is_active = False
            await self._uow.accounts.update(account)
        return AccountView.from_account(account)

    async def delete_account(self, account_number: UUID) -> None:
        """Delete an account. It must hold no money and must already be deactivated."""
        async with self._uow.transaction():
            account = await self._load(account_number)
            if account.has_balance:
                raise NonZeroBalanceError(
                    f"Cannot delete account {account_number} with a balance of "
                    f"{format_amount(account.balance)}"
                )
            if account.is_active:
                raise AccountActiveError(account_number)
            await self._uow.accounts.delete(account)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_account(self, account_number: UUID) -> AccountView:
        return AccountView.from_account(await self._load(account_number))

    async def get_balance(self, account_number: UUID) -> BalanceView:
        account = await self._load(account_number)
        return BalanceView(
            account_number=account.account_number,
            balance=account.balance,
            balance_display=format_amount(account.balance),
        )

    async def list_accounts(self) -> list[AccountView]:
        return [AccountView.from_account(a) for a in await self._uow.accounts.get_all()]

    async def list_owner_accounts(self, owner_id: UUID) -> list[AccountView]:
        return [AccountView.from_account(a) for a in await self._uow.accounts.get_by_owner(owner_id)]

    async def is_account_owner(self, owner_id: UUID, account_number: UUID) -> bool:
        account = await self._uow.accounts.get_by_id(account_number)
        return account is not None and account.owner_id == owner_id

    async def _load(self, account_number: UUID) -> Account:
        account = await self._uow.accounts.get_by_id(account_number)
        if account is None:
            raise AccountNotFoundError(account_number)
        return account


def _require_active(account: Account) -> None:
    if not account.is_active:
        raise AccountInactiveError(account.account_number)
