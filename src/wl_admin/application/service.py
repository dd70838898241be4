"""AdminService — administrative oversight: staff, customers, accounts, audit trail.

Every mutation is audited under its ADMIN_* action type with the acting admin as
performer. Deposits delegate to AccountService, which writes the single DEPOSIT entry.
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from src.wl_account.application.schemas import AccountView, DepositResult
from src.wl_account.application.service import AccountService
from src.wl_audit.application.schemas import AuditLogView
from src.wl_audit.application.service import AuditLogService, AuditOutcome, Recorder
from src.wl_audit.domain.models import AuditLog
from src.wl_common.enums import AuditLogActionType, UserRole
from src.wl_common.errors import (
    EmailExistsError,
    ManagerDeletionError,
    UserNotFoundError,
    translate_errors,
)
from src.wl_common.unit_of_work import UnitOfWork
from src.wl_customer.application.service import CustomerService
from src.wl_user.application.schemas import CreateAdminRequest, UserView
from src.wl_user.auth.password import BcryptHasher
from src.wl_user.domain.models import User


class AdminService:
    def __init__(
        self,
        uow: UnitOfWork,
        customers: CustomerService | None = None,
        accounts: AccountService | None = None,
        audit: AuditLogService | None = None,
        hasher: BcryptHasher | None = None,
    ) -> None:
        self._uow = uow
        self._audit = audit or AuditLogService(uow)
        self._accounts = accounts or AccountService(uow, self._audit)
        self._hasher = hasher or BcryptHasher()
        self._customers = customers or CustomerService(uow, self._accounts, self._audit, self._hasher)

    def _recorder(self, action_type: AuditLogActionType, performed_by: UUID, subject: str) -> Recorder:
        async def record(outcome: AuditOutcome) -> None:
            verb = "Succeeded" if outcome.succeeded else "Failed"
            await self._audit.log_action(
                AuditLog.record(
                    action_type,
                    outcome.succeeded,
                    f"{verb}: {subject} by admin {performed_by}",
                    performed_by,
                )
            )

        return record

    # ------------------------------------------------------------------
    # Staff
    # ------------------------------------------------------------------

    async def create_admin(self, performed_by: UUID, request: CreateAdminRequest) -> UserView:
        if await self._uow.users.find_by_email(request.email) is not None:
            raise EmailExistsError()

        record = self._recorder(
            AuditLogActionType.ADMIN_CREATION, performed_by, f"create admin {request.email}"
        )
        async with self._audit.recording(record, performed_by) as outcome:
            with translate_errors(f"Failed to create admin {request.email}"):
                async with self._uow.transaction():
                    admin = User(
                        email=request.email,
                        first_name=request.first_name,
                        last_name=request.last_name,
                        phone_number=request.phone_number,
                        date_of_birth=request.date_of_birth,
                        password_hash=self._hasher.hash(request.password),
                        role=UserRole.ADMIN,
                    )
                    await self._uow.users.add(admin)
            outcome.succeeded = True
        return UserView.from_user(admin)

    async def get_admin(self, admin_id: UUID) -> UserView:
        return UserView.from_user(await self._load_staff(admin_id))

    async def list_admins(self) -> list[UserView]:
        staff = await self._uow.users.get_by_role(UserRole.ADMIN)
        staff += await self._uow.users.get_by_role(UserRole.MANAGER)
        return [UserView.from_user(u) for u in staff]

    async def delete_admin(self, performed_by: UUID, admin_id: UUID) -> None:
        record = self._recorder(
            AuditLogActionType.ADMIN_DELETION, performed_by, f"delete admin {admin_id}"
        )
        async with self._audit.recording(record, performed_by) as outcome:
            with translate_errors(f"Failed to delete admin {admin_id}"):
                async with self._uow.transaction():
                    admin = await self._load_staff(admin_id)
                    if admin.role is UserRole.MANAGER:
                        raise ManagerDeletionError()
                    await self._uow.users.delete(admin)
            outcome.succeeded = True

    # ------------------------------------------------------------------
    # Customers & accounts
    # ------------------------------------------------------------------

    async def list_customers(self) -> list[UserView]:
        return await self._customers.list_customers()

    async def get_customer(self, customer_id: UUID) -> UserView:
        return await self._customers.get_customer(customer_id)

    async def delete_customer(self, performed_by: UUID, customer_id: UUID) -> None:
        record = self._recorder(
            AuditLogActionType.ADMIN_CUSTOMER_DELETION, performed_by, f"delete customer {customer_id}"
        )
        async with self._audit.recording(record, performed_by) as outcome:
            await self._customers.remove_customer(customer_id)
            outcome.succeeded = True

    async def get_account(self, account_number: UUID) -> AccountView:
        return await self._accounts.get_account(account_number)

    async def list_accounts(self) -> list[AccountView]:
        return await self._accounts.list_accounts()

    async def activate_account(self, performed_by: UUID, account_number: UUID) -> AccountView:
        record = self._recorder(
            AuditLogActionType.ADMIN_ACCOUNT_ACTIVATION, performed_by, f"activate account {account_number}"
        )
        async with self._audit.recording(record, performed_by) as outcome:
            with translate_errors(f"Failed to activate account {account_number}"):
                view = await self._accounts.activate_account(account_number)
            outcome.succeeded = True
        return view

    async def deactivate_account(self, performed_by: UUID, account_number: UUID) -> AccountView:
        record = self._recorder(
            AuditLogActionType.ADMIN_ACCOUNT_DEACTIVATION, performed_by, f"deactivate account {account_number}"
        )
        async with self._audit.recording(record, performed_by) as outcome:
            with translate_errors(f"Failed to deactivate account {account_number}"):
                view = await self._accounts.deactivate_account(account_number)
            outcome.succeeded = True
        return view

    async def delete_account(self, performed_by: UUID, account_number: UUID) -> None:
        record = self._recorder(
            AuditLogActionType.ADMIN_ACCOUNT_DELETION, performed_by, f"delete account {account_number}"
        )
        async with self._audit.recording(record, performed_by) as outcome:
            with translate_errors(f"Failed to delete account {account_number}"):
                await self._accounts.delete_account(account_number)
            outcome.succeeded = True

    async def deposit(self, performed_by: UUID, to_account: UUID, amount: Decimal) -> DepositResult:
        return await self._accounts.deposit(performed_by, to_account, amount)

    # ------------------------------------------------------------------
    # Audit trail
    # ------------------------------------------------------------------

    async def get_all_logs(self) -> list[AuditLogView]:
        return await self._audit.get_all_logs()

    async def get_user_logs(self, user_id: UUID) -> list[AuditLogView]:
        return await self._audit.get_user_logs(user_id)

    async def get_logs_by_action_type(self, action_type: AuditLogActionType) -> list[AuditLogView]:
        return await self._audit.get_logs_by_action_type(action_type)

    async def get_logs_by_time_range(self, begin: datetime, end: datetime) -> list[AuditLogView]:
        return await self._audit.get_logs_by_time_range(begin, end)

    async def _load_staff(self, user_id: UUID) -> User:
        user = await self._uow.users.get_by_id(user_id)
        if user is None or not user.is_staff:
            raise UserNotFoundError(user_id)
        return user
