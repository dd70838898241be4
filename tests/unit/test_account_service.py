"""Unit tests for AccountService against the in-memory unit of work."""

from datetime import UTC, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from src.wl_account.application.service import AccountService
from src.wl_common.enums import AuditLogActionType, AuditLogStatus, IsolationLevel
from src.wl_common.errors import (
    AccountActiveError,
    AccountInactiveError,
    AccountNotFoundError,
    AlreadyActiveError,
    AlreadyInactiveError,
    ErrorKind,
    InfrastructureError,
    InsufficientFundsError,
    InvalidAmountError,
    NonZeroBalanceError,
    SameAccountTransferError,
    TransactionAlreadyActiveError,
)
from tests.fakes import InMemoryDatabase, InMemoryUnitOfWork


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def uow(db: InMemoryDatabase) -> InMemoryUnitOfWork:
    return InMemoryUnitOfWork(db)


@pytest.fixture
def svc(uow: InMemoryUnitOfWork) -> AccountService:
    return AccountService(uow)


class TestTransfer:
    async def test_moves_money_and_audits_success(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="1000.00")
        b = db.seed_account(balance="400.00")

        result = await svc.transfer(a.account_number, b.account_number, Decimal("500.00"))

        assert db.balance(a) == Decimal("500.00")
        assert db.balance(b) == Decimal("900.00")
        assert result.from_balance_after == Decimal("500.00")
        assert uow.isolation_levels == [IsolationLevel.SERIALIZABLE]
        logs = db.logs(AuditLogActionType.TRANSFER)
        assert len(logs) == 1
        assert logs[0].status is AuditLogStatus.SUCCESS
        assert logs[0].performed_by == a.owner_id
        assert str(a.account_number) in logs[0].details
        assert str(b.account_number) in logs[0].details
        assert "$500.00" in logs[0].details

    async def test_insufficient_funds_after_earlier_transfer(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="1000.00")
        b = db.seed_account(balance="400.00")
        await svc.transfer(a.account_number, b.account_number, Decimal("500.00"))

        with pytest.raises(InsufficientFundsError):
            await svc.transfer(a.account_number, b.account_number, Decimal("600.00"))

        assert db.balance(a) == Decimal("500.00")
        assert db.balance(b) == Decimal("900.00")
        statuses = [e.status for e in db.logs(AuditLogActionType.TRANSFER)]
        assert sorted(statuses) == [AuditLogStatus.FAILED, AuditLogStatus.SUCCESS]
        assert uow.rollbacks == 1
        assert not uow.in_transaction

    async def test_missing_destination_rolls_back_and_audits_once(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="50.00")
        missing = uuid4()

        with pytest.raises(AccountNotFoundError):
            await svc.transfer(a.account_number, missing, Decimal("10.00"))

        assert db.balance(a) == Decimal("50.00")
        assert uow.rollbacks == 1
        logs = db.logs()
        assert len(logs) == 1
        assert logs[0].status is AuditLogStatus.FAILED
        assert logs[0].details.startswith("Failed to transfer $10.00")

    async def test_missing_source_audited_with_caller_as_performer(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        b = db.seed_account()
        actor = uuid4()

        with pytest.raises(AccountNotFoundError):
            await svc.transfer(uuid4(), b.account_number, Decimal("1.00"), performed_by=actor)

        logs = db.logs()
        assert len(logs) == 1
        assert logs[0].performed_by == actor
        assert logs[0].status is AuditLogStatus.FAILED

    async def test_same_account_is_rejected_without_audit(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="10.00")

        with pytest.raises(SameAccountTransferError):
            await svc.transfer(a.account_number, a.account_number, Decimal("1.00"))

        assert db.logs() == []
        assert uow.isolation_levels == []

    @pytest.mark.parametrize("amount", ["0", "-1.00", "0.005", "12.345"])
    async def test_invalid_amount_is_rejected_without_audit(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService, amount: str
    ) -> None:
        a = db.seed_account(balance="10.00")
        b = db.seed_account()

        with pytest.raises(InvalidAmountError):
            await svc.transfer(a.account_number, b.account_number, Decimal(amount))

        assert db.logs() == []
        assert uow.isolation_levels == []

    async def test_inactive_destination_fails(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="10.00")
        b = db.seed_account(is_active=False)

        with pytest.raises(AccountInactiveError):
            await svc.transfer(a.account_number, b.account_number, Decimal("5.00"))

        assert db.balance(a) == Decimal("10.00")
        assert db.balance(b) == Decimal("0")
        assert [e.status for e in db.logs()] == [AuditLogStatus.FAILED]

    async def test_inactive_source_fails(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account(balance="10.00", is_active=False)
        b = db.seed_account()

        with pytest.raises(AccountInactiveError):
            await svc.transfer(a.account_number, b.account_number, Decimal("5.00"))

        assert db.balance(a) == Decimal("10.00")

    async def test_commit_failure_is_wrapped_rolled_back_and_audited(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="10.00")
        b = db.seed_account()
        db.fail_commits = 1

        with pytest.raises(InfrastructureError) as exc_info:
            await svc.transfer(a.account_number, b.account_number, Decimal("5.00"))

        assert exc_info.value.kind is ErrorKind.INFRASTRUCTURE
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert db.balance(a) == Decimal("10.00")
        assert db.balance(b) == Decimal("0")
        assert uow.rollbacks == 1
        assert uow.discards >= 1
        assert [e.status for e in db.logs()] == [AuditLogStatus.FAILED]

    async def test_audit_failure_does_not_mask_successful_transfer(
        self, db: InMemoryDatabase, svc: AccountService, caplog: pytest.LogCaptureFixture
    ) -> None:
        a = db.seed_account(balance="10.00")
        b = db.seed_account()
        db.fail_audit_writes = True

        result = await svc.transfer(a.account_number, b.account_number, Decimal("5.00"))

        assert result.amount == Decimal("5.00")
        assert db.balance(b) == Decimal("5.00")
        assert db.logs() == []
        alerts = [r for r in caplog.records if r.name == "wl.audit.alert"]
        assert alerts and alerts[0].levelname == "CRITICAL"

    async def test_audit_failure_does_not_mask_business_error(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="1.00")
        b = db.seed_account()
        db.fail_audit_writes = True

        with pytest.raises(InsufficientFundsError):
            await svc.transfer(a.account_number, b.account_number, Decimal("5.00"))

    async def test_nested_transaction_is_refused_and_audited(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="10.00")
        b = db.seed_account()
        await uow.begin_transaction()

        with pytest.raises(TransactionAlreadyActiveError):
            await svc.transfer(a.account_number, b.account_number, Decimal("5.00"))

        # The caller's transaction is left for the caller to resolve
        assert uow.in_transaction
        await uow.rollback()


class TestDeposit:
    async def test_deposit_credits_and_audits(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="1.00")
        admin = uuid4()

        result = await svc.deposit(admin, a.account_number, Decimal("99.00"))

        assert result.balance_after == Decimal("100.00")
        assert db.balance(a) == Decimal("100.00")
        assert uow.isolation_levels == [IsolationLevel.SERIALIZABLE]
        logs = db.logs(AuditLogActionType.DEPOSIT)
        assert len(logs) == 1
        assert logs[0].performed_by == admin
        assert logs[0].details == f"Deposited $99.00 to account {a.account_number}"

    @pytest.mark.parametrize("amount", ["0", "0.005", "99.999"])
    async def test_invalid_amount_not_audited(
        self, db: InMemoryDatabase, uow: InMemoryUnitOfWork, svc: AccountService, amount: str
    ) -> None:
        a = db.seed_account(balance="400.00")
        with pytest.raises(InvalidAmountError):
            await svc.deposit(uuid4(), a.account_number, Decimal(amount))
        assert db.balance(a) == Decimal("400.00")
        assert db.logs() == []
        assert uow.isolation_levels == []

    async def test_missing_account_audited_as_failed(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        with pytest.raises(AccountNotFoundError):
            await svc.deposit(uuid4(), uuid4(), Decimal("5.00"))
        assert [e.status for e in db.logs(AuditLogActionType.DEPOSIT)] == [AuditLogStatus.FAILED]

    async def test_inactive_account_rejected(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account(is_active=False)
        with pytest.raises(AccountInactiveError):
            await svc.deposit(uuid4(), a.account_number, Decimal("5.00"))
        assert db.balance(a) == Decimal("0")


class TestActivation:
    async def test_activate_inactive_account(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account(is_active=False)
        view = await svc.activate_account(a.account_number)
        assert view.is_active is True
        assert db.accounts[a.account_number].is_active is True

    async def test_activate_active_account_fails_without_change(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        a = db.seed_account(balance="3.00")
        with pytest.raises(AlreadyActiveError):
            await svc.activate_account(a.account_number)
        assert db.accounts[a.account_number].is_active is True
        assert db.balance(a) == Decimal("3.00")

    async def test_activate_missing_account(self, svc: AccountService) -> None:
        with pytest.raises(AccountNotFoundError):
            await svc.activate_account(uuid4())

    async def test_deactivate_empty_account(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account()
        view = await svc.deactivate_account(a.account_number)
        assert view.is_active is False
        assert db.accounts[a.account_number].is_active is False

    async def test_deactivate_with_balance_fails(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account(balance="0.01")
        with pytest.raises(NonZeroBalanceError):
            await svc.deactivate_account(a.account_number)
        assert db.accounts[a.account_number].is_active is True

    async def test_deactivate_inactive_account_fails(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        a = db.seed_account(is_active=False)
        with pytest.raises(AlreadyInactiveError):
            await svc.deactivate_account(a.account_number)


class TestDelete:
    async def test_delete_inactive_empty_account(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account(is_active=False)
        await svc.delete_account(a.account_number)
        assert a.account_number not in db.accounts

    async def test_delete_active_account_is_refused(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        a = db.seed_account()
        with pytest.raises(AccountActiveError):
            await svc.delete_account(a.account_number)
        assert a.account_number in db.accounts

    async def test_delete_with_balance_is_refused(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account(balance="2.00", is_active=False)
        with pytest.raises(NonZeroBalanceError):
            await svc.delete_account(a.account_number)
        assert a.account_number in db.accounts

    async def test_delete_missing_account(self, svc: AccountService) -> None:
        with pytest.raises(AccountNotFoundError):
            await svc.delete_account(uuid4())


class TestCreateAndQuery:
    async def test_create_account_persists_and_audits(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        owner = db.seed_user()

        view = await svc.create_account(owner.id)

        stored = db.accounts[view.account_number]
        assert stored.owner_id == owner.id
        assert stored.is_active is True
        assert stored.balance == Decimal("0")
        logs = db.logs(AuditLogActionType.CUSTOMER_ACCOUNT_CREATION)
        assert len(logs) == 1
        assert logs[0].status is AuditLogStatus.SUCCESS
        assert logs[0].performed_by == owner.id

    async def test_create_account_keeps_given_timestamp(
        self, db: InMemoryDatabase, svc: AccountService
    ) -> None:
        owner = db.seed_user()
        opened = datetime(2024, 3, 1, 9, 30, tzinfo=UTC)

        view = await svc.create_account(owner.id, created_at=opened)

        assert db.accounts[view.account_number].created_at == opened

    async def test_get_balance(self, db: InMemoryDatabase, svc: AccountService) -> None:
        a = db.seed_account(balance="1234.50")
        balance = await svc.get_balance(a.account_number)
        assert balance.balance == Decimal("1234.50")
        assert balance.balance_display == "$1,234.50"

    async def test_get_missing_account(self, svc: AccountService) -> None:
        with pytest.raises(AccountNotFoundError):
            await svc.get_account(uuid4())

    async def test_owner_queries(self, db: InMemoryDatabase, svc: AccountService) -> None:
        owner = db.seed_user()
        mine = db.seed_account(owner)
        other = db.seed_account()

        owned = await svc.list_owner_accounts(owner.id)

        assert [v.account_number for v in owned] == [mine.account_number]
        assert await svc.is_account_owner(owner.id, mine.account_number) is True
        assert await svc.is_account_owner(owner.id, other.account_number) is False
        assert await svc.is_account_owner(owner.id, uuid4()) is False
        assert len(await svc.list_accounts()) == 2

