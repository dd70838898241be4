"""CustomerService — customer-facing facade over AccountService, AuditLogService and Users."""

import logging
from decimal import Decimal
from uuid import UUID

from src.wl_account.application.schemas import AccountView, BalanceView, TransferResult
from src.wl_account.application.service import AccountService
from src.wl_audit.application.schemas import AuditLogView
from src.wl_audit.application.service import AuditLogService, AuditOutcome
from src.wl_audit.domain.models import AuditLog
from src.wl_common.enums import AuditLogActionType, UserRole
from src.wl_common.errors import (
    AccountNotFoundError,
    EmailExistsError,
    NoPrimaryAccountError,
    NonZeroBalanceError,
    NotAccountOwnerError,
    UserNotFoundError,
    translate_errors,
)
from src.wl_common.unit_of_work import UnitOfWork
from src.wl_user.application.schemas import RegisterRequest, UpdateProfileRequest, UserView
from src.wl_user.auth.password import BcryptHasher
from src.wl_user.domain.models import User

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(
        self,
        uow: UnitOfWork,
        accounts: AccountService | None = None,
        audit: AuditLogService | None = None,
        hasher: BcryptHasher | None = None,
    ) -> None:
        self._uow = uow
        self._audit = audit or AuditLogService(uow)
        self._accounts = accounts or AccountService(uow, self._audit)
        self._hasher = hasher or BcryptHasher()

    # ------------------------------------------------------------------
    # Registration & profile
    # ------------------------------------------------------------------

    async def register_customer(self, request: RegisterRequest) -> UserView:
        """Create the customer and their first account in one transaction."""
        if await self.is_email_registered(request.email):
            raise EmailExistsError()

        user: User | None = None

        async def record(outcome: AuditOutcome) -> None:
            details = (
                f"Registered customer {user.id} ({user.email})"
                if outcome.succeeded and user is not None
                else f"Failed to register customer {request.email}"
            )
            await self._audit.log_action(
                AuditLog.record(AuditLogActionType.CUSTOMER_CREATION, outcome.succeeded, details)
            )

        async with self._audit.recording(record) as outcome:
            with translate_errors(f"Failed to register customer {request.email}"):
                async with self._uow.transaction():
                    user = User(
                        email=request.email,
                        first_name=request.first_name,
                        last_name=request.last_name,
                        phone_number=request.phone_number,
                        date_of_birth=request.date_of_birth,
                        password_hash=self._hasher.hash(request.password),
                        role=UserRole.CUSTOMER,
                    )
                    await self._uow.users.add(user)
                    # Flush so the owner row exists before its account references it
                    await self._uow.save_changes()
                    # Joins this transaction, so its audit entry rolls back with the registration
                    account = await self._accounts.create_account(user.id)
                    user.current_account_number = account.account_number
                    await self._uow.users.update(user)
            outcome.succeeded = True

        logger.info("Registered customer %s", user.id)
        return UserView.from_user(user)

    async def is_email_registered(self, email: str) -> bool:
        return await self._uow.users.find_by_email(email) is not None

    async def get_customer(self, customer_id: UUID) -> UserView:
        return UserView.from_user(await self._load_customer(customer_id))

    async def find_by_email(self, email: str) -> UserView | None:
        user = await self._uow.users.find_by_email(email)
        return UserView.from_user(user) if user is not None else None

    async def list_customers(self) -> list[UserView]:
        return [UserView.from_user(u) for u in await self._uow.users.get_all_customers()]

    async def verify_password(self, customer_id: UUID, password: str) -> bool:
        user = await self._load_customer(customer_id)
        return self._hasher.verify(password, user.password_hash)

    async def update_profile(self, customer_id: UUID, request: UpdateProfileRequest) -> UserView:
        async with self._uow.transaction():
            user = await self._load_customer(customer_id)
            user.rename(request.first_name, request.last_name)
            await self._uow.users.update(user)
        return UserView.from_user(user)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def create_account(self, customer_id: UUID) -> AccountView:
        await self._load_customer(customer_id)
        return await self._accounts.create_account(customer_id)

    async def list_accounts(self, customer_id: UUID) -> list[AccountView]:
        return await self._accounts.list_owner_accounts(customer_id)

    async def set_primary_account(self, customer_id: UUID, account_number: UUID) -> UserView:
        if not await self._accounts.is_account_owner(customer_id, account_number):
            raise NotAccountOwnerError(account_number)
        async with self._uow.transaction():
            user = await self._load_customer(customer_id)
            user.current_account_number = account_number
            await self._uow.users.update(user)
        return UserView.from_user(user)

    async def get_current_account(self, customer_id: UUID) -> AccountView:
        return await self._accounts.get_account(await self._primary_account(customer_id))

    async def get_current_balance(self, customer_id: UUID) -> BalanceView:
        return await self._accounts.get_balance(await self._primary_account(customer_id))

    async def delete_account(self, customer_id: UUID, account_number: UUID) -> None:
        """Close one of the customer's accounts: deactivate if needed, then delete."""
        if not await self._accounts.is_account_owner(customer_id, account_number):
            raise NotAccountOwnerError(account_number)

        async def record(outcome: AuditOutcome) -> None:
            verb = "Deleted" if outcome.succeeded else "Failed to delete"
            await self._audit.log_action(
                AuditLog.record(
                    AuditLogActionType.CUSTOMER_ACCOUNT_DELETION,
                    outcome.succeeded,
                    f"{verb} account {account_number} of customer {customer_id}",
                    customer_id,
                )
            )

        async with self._audit.recording(record, customer_id) as outcome:
            with translate_errors(f"Failed to delete account {account_number}"):
                async with self._uow.transaction():
                    user = await self._load_customer(customer_id)
                    await self._close_account(account_number)
                    if user.current_account_number == account_number:
                        user.current_account_number = None
                        await self._uow.users.update(user)
            outcome.succeeded = True

    async def delete_customer(self, customer_id: UUID) -> None:
        """Close the customer's whole profile on their own request, audited as CUSTOMER_DELETION."""

        async def record(outcome: AuditOutcome) -> None:
            verb = "Deleted" if outcome.succeeded else "Failed to delete"
            await self._audit.log_action(
                AuditLog.record(
                    AuditLogActionType.CUSTOMER_DELETION,
                    outcome.succeeded,
                    f"{verb} customer {customer_id}",
                    customer_id,
                )
            )

        async with self._audit.recording(record, customer_id) as outcome:
            await self.remove_customer(customer_id)
            outcome.succeeded = True

    async def remove_customer(self, customer_id: UUID) -> None:
        """Remove a customer and all their (empty) accounts in one transaction.

        Writes no audit entry. Callers record the outcome under their own action type.
        """
        with translate_errors(f"Failed to delete customer {customer_id}"):
            async with self._uow.transaction():
                user = await self._load_customer(customer_id)
                accounts = await self._uow.accounts.get_by_owner(customer_id)
                if any(a.has_balance for a in accounts):
                    raise NonZeroBalanceError(
                        f"Customer {customer_id} still holds money in one or more accounts"
                    )
                for account in accounts:
                    await self._close_account(account.account_number)
                await self._uow.save_changes()
                await self._uow.users.delete(user)
        logger.info("Deleted customer %s with %d accounts", customer_id, len(accounts))

    # ------------------------------------------------------------------
    # Money movement & history
    # ------------------------------------------------------------------

    async def transfer(self, customer_id: UUID, to_account: UUID, amount: Decimal) -> TransferResult:
        """Transfer from the customer's primary account."""
        from_account = await self._primary_account(customer_id)
        return await self._accounts.transfer(
            from_account, to_account, amount, performed_by=customer_id
        )

    async def get_transaction_history(self, customer_id: UUID) -> list[AuditLogView]:
        return await self._audit.get_transaction_history(customer_id)

    # ------------------------------------------------------------------

    async def _close_account(self, account_number: UUID) -> None:
        account = await self._uow.accounts.get_by_id(account_number)
        if account is None:
            raise AccountNotFoundError(account_number)
        if account.is_active:
            await self._accounts.deactivate_account(account_number)
        await self._accounts.delete_account(account_number)

    async def _load_customer(self, customer_id: UUID) -> User:
        user = await self._uow.users.get_by_id(customer_id)
        if user is None or not user.is_customer:
            raise UserNotFoundError(customer_id)
        return user

    async def _primary_account(self, customer_id: UUID) -> UUID:
        user = await self._load_customer(customer_id)
        if user.current_account_number is None:
            raise NoPrimaryAccountError(customer_id)
        return user.current_account_number
