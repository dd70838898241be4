"""Unit tests for AdminService."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from src.wl_admin.application.service import AdminService
from src.wl_common.enums import AuditLogActionType, AuditLogStatus, UserRole
from src.wl_common.errors import (
    AccountNotFoundError,
    AlreadyActiveError,
    EmailExistsError,
    InvalidAmountError,
    InvalidTimeRangeError,
    ManagerDeletionError,
    NonZeroBalanceError,
    UserNotFoundError,
)
from src.wl_user.application.schemas import CreateAdminRequest
from src.wl_user.auth.password import BcryptHasher
from src.wl_user.domain.models import User
from tests.fakes import InMemoryDatabase, InMemoryUnitOfWork


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def svc(db: InMemoryDatabase) -> AdminService:
    return AdminService(InMemoryUnitOfWork(db), hasher=BcryptHasher(rounds=4))


@pytest.fixture
def manager(db: InMemoryDatabase) -> User:
    return db.seed_user(role=UserRole.MANAGER, email="boss@example.com")


class TestStaff:
    async def test_create_admin(self, db: InMemoryDatabase, svc: AdminService, manager: User) -> None:
        request = CreateAdminRequest(
            email="ops@example.com",
            password="Passw0rdX",
            first_name="Olga",
            last_name="Ops",
            phone_number="01111111111",
            date_of_birth=date(1980, 2, 2),
        )

        view = await svc.create_admin(manager.id, request)

        assert view.role == "ADMIN"
        assert db.users[view.id].role is UserRole.ADMIN
        logs = db.logs(AuditLogActionType.ADMIN_CREATION)
        assert len(logs) == 1
        assert logs[0].performed_by == manager.id
        assert {u.email for u in await svc.list_admins()} == {"ops@example.com", "boss@example.com"}

    async def test_create_admin_duplicate_email(self, svc: AdminService, manager: User) -> None:
        request = CreateAdminRequest(
            email="boss@example.com",
            password="Passw0rdX",
            first_name="Olga",
            last_name="Ops",
            phone_number="01111111111",
            date_of_birth=date(1980, 2, 2),
        )
        with pytest.raises(EmailExistsError):
            await svc.create_admin(manager.id, request)

    async def test_manager_cannot_be_deleted(self, db: InMemoryDatabase, svc: AdminService, manager: User) -> None:
        admin = db.seed_user(role=UserRole.ADMIN)

        with pytest.raises(ManagerDeletionError):
            await svc.delete_admin(admin.id, manager.id)

        assert manager.id in db.users
        logs = db.logs(AuditLogActionType.ADMIN_DELETION)
        assert [e.status for e in logs] == [AuditLogStatus.FAILED]

    async def test_delete_admin(self, db: InMemoryDatabase, svc: AdminService, manager: User) -> None:
        admin = db.seed_user(role=UserRole.ADMIN)
        await svc.delete_admin(manager.id, admin.id)
        assert admin.id not in db.users

    async def test_customer_is_not_staff(self, db: InMemoryDatabase, svc: AdminService) -> None:
        customer = db.seed_user()
        with pytest.raises(UserNotFoundError):
            await svc.get_admin(customer.id)


class TestAccountOversight:
    async def test_activate_is_audited(self, db: InMemoryDatabase, svc: AdminService, manager: User) -> None:
        account = db.seed_account(is_active=False)

        view = await svc.activate_account(manager.id, account.account_number)

        assert view.is_active is True
        logs = db.logs(AuditLogActionType.ADMIN_ACCOUNT_ACTIVATION)
        assert [(e.status, e.performed_by) for e in logs] == [(AuditLogStatus.SUCCESS, manager.id)]

    async def test_failed_activation_is_audited_once(
        self, db: InMemoryDatabase, svc: AdminService, manager: User
    ) -> None:
        account = db.seed_account()

        with pytest.raises(AlreadyActiveError):
            await svc.activate_account(manager.id, account.account_number)

        assert len(db.logs()) == 1
        assert db.logs()[0].status is AuditLogStatus.FAILED

    async def test_deactivate_with_balance_is_refused(
        self, db: InMemoryDatabase, svc: AdminService, manager: User
    ) -> None:
        account = db.seed_account(balance="9.99")

        with pytest.raises(NonZeroBalanceError):
            await svc.deactivate_account(manager.id, account.account_number)

        assert db.accounts[account.account_number].is_active is True
        assert db.logs(AuditLogActionType.ADMIN_ACCOUNT_DEACTIVATION)[0].status is AuditLogStatus.FAILED

    async def test_delete_missing_account(self, db: InMemoryDatabase, svc: AdminService, manager: User) -> None:
        with pytest.raises(AccountNotFoundError):
            await svc.delete_account(manager.id, uuid4())
        assert len(db.logs(AuditLogActionType.ADMIN_ACCOUNT_DELETION)) == 1

    async def test_deposit_writes_a_single_entry(
        self, db: InMemoryDatabase, svc: AdminService, manager: User
    ) -> None:
        account = db.seed_account()

        result = await svc.deposit(manager.id, account.account_number, Decimal("250.00"))

        assert result.balance_after == Decimal("250.00")
        logs = db.logs()
        assert len(logs) == 1
        assert logs[0].action_type is AuditLogActionType.DEPOSIT
        assert logs[0].performed_by == manager.id

    async def test_sub_cent_deposit_is_rejected(
        self, db: InMemoryDatabase, svc: AdminService, manager: User
    ) -> None:
        account = db.seed_account(balance="10.00")

        with pytest.raises(InvalidAmountError):
            await svc.deposit(manager.id, account.account_number, Decimal("0.015"))

        assert db.balance(account) == Decimal("10.00")
        assert db.logs() == []

    async def test_delete_customer_is_audited(self, db: InMemoryDatabase, svc: AdminService, manager: User) -> None:
        customer = db.seed_user()
        db.seed_account(customer)

        await svc.delete_customer(manager.id, customer.id)

        assert customer.id not in db.users
        logs = db.logs(AuditLogActionType.ADMIN_CUSTOMER_DELETION)
        assert [e.status for e in logs] == [AuditLogStatus.SUCCESS]
        assert db.logs(AuditLogActionType.CUSTOMER_DELETION) == []


class TestAuditQueries:
    async def test_inverted_time_range(self, svc: AdminService) -> None:
        now = datetime.now(timezone.utc)
        with pytest.raises(InvalidTimeRangeError):
            await svc.get_logs_by_time_range(now + timedelta(hours=1), now)

    async def test_logs_by_user(self, db: InMemoryDatabase, svc: AdminService, manager: User) -> None:
        account = db.seed_account()
        await svc.deposit(manager.id, account.account_number, Decimal("1.00"))

        assert len(await svc.get_user_logs(manager.id)) == 1
        assert len(await svc.get_logs_by_action_type(AuditLogActionType.TRANSFER)) == 0
        assert len(await svc.get_all_logs()) == 1
