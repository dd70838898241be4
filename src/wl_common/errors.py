"""Unified error codes and custom exceptions.

Every error is classified as BUSINESS or INFRASTRUCTURE when it is constructed,
so callers branch on ``exc.kind`` rather than on exception types or message text.

Error code ranges:
  1xxx: User
  2xxx: Account
  3xxx: Audit
  9xxx: System
"""

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal
from enum import Enum
from uuid import UUID


class ErrorKind(str, Enum):
    BUSINESS = "BUSINESS"
    INFRASTRUCTURE = "INFRASTRUCTURE"


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
        kind: ErrorKind = ErrorKind.INFRASTRUCTURE,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        self.kind = kind
        super().__init__(message)

    @property
    def is_business(self) -> bool:
        return self.kind is ErrorKind.BUSINESS


class BusinessError(AppError):
    """Recoverable input/business rule violation, surfaced to the caller verbatim."""

    def __init__(self, code: int, message: str, http_status: int = 400) -> None:
        super().__init__(code, message, http_status, ErrorKind.BUSINESS)


# --- 1xxx: User ---

class EmailExistsError(BusinessError):
    def __init__(self) -> None:
        super().__init__(1001, "Email already exists", 409)


class UserNotFoundError(BusinessError):
    def __init__(self, user_id: UUID | str) -> None:
        super().__init__(1002, f"User not found: {user_id}", 404)


class InvalidUserDataError(BusinessError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, detail, 400)


class NotAccountOwnerError(BusinessError):
    def __init__(self, account_number: UUID) -> None:
        super().__init__(1004, f"Account {account_number} does not belong to this customer", 403)


class NoPrimaryAccountError(BusinessError):
    def __init__(self, customer_id: UUID) -> None:
        super().__init__(1005, f"Customer {customer_id} has no primary account", 404)


class ManagerDeletionError(BusinessError):
    def __init__(self) -> None:
        super().__init__(1006, "A manager cannot be deleted", 400)


# --- 2xxx: Account ---

class InvalidAmountError(BusinessError):
    def __init__(self, amount: Decimal) -> None:
        super().__init__(2001, f"Amount must be a positive number of whole cents, got {amount}", 400)


class InsufficientFundsError(BusinessError):
    def __init__(self, required: Decimal, available: Decimal) -> None:
        super().__init__(
            2002,
            f"Insufficient funds: required {required}, available {available}",
            422,
        )


class AccountNotFoundError(BusinessError):
    def __init__(self, account_number: UUID) -> None:
        super().__init__(2003, f"Account not found: {account_number}", 404)


class SameAccountTransferError(BusinessError):
    def __init__(self) -> None:
        super().__init__(2004, "Cannot transfer to the same account", 400)


class AccountInactiveError(BusinessError):
    def __init__(self, account_number: UUID) -> None:
        super().__init__(2005, f"Account is not active: {account_number}", 400)


class AlreadyActiveError(BusinessError):
    def __init__(self, account_number: UUID) -> None:
        super().__init__(2006, f"Account is already active: {account_number}", 400)


class AlreadyInactiveError(BusinessError):
    def __init__(self, account_number: UUID) -> None:
        super().__init__(2007, f"Account is already inactive: {account_number}", 400)


class NonZeroBalanceError(BusinessError):
    def __init__(self, detail: str) -> None:
        super().__init__(2008, detail, 400)


class AccountActiveError(BusinessError):
    def __init__(self, account_number: UUID) -> None:
        super().__init__(2009, f"Account must be deactivated before deletion: {account_number}", 400)


# --- 3xxx: Audit ---

class InvalidTimeRangeError(BusinessError):
    def __init__(self) -> None:
        super().__init__(3001, "Begin time must not be after end time", 400)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class InfrastructureError(AppError):
    """Store, cache or transaction failure wrapped with a contextual message."""

    def __init__(self, detail: str) -> None:
        super().__init__(9003, detail, 500)


class TransactionAlreadyActiveError(AppError):
    def __init__(self) -> None:
        super().__init__(9004, "A transaction is already active on this unit of work", 500)


class NoActiveTransactionError(AppError):
    def __init__(self) -> None:
        super().__init__(9005, "No active transaction to commit", 500)


@contextmanager
def translate_errors(message: str) -> Iterator[None]:
    """Let AppError through unchanged; wrap anything else as InfrastructureError."""
    try:
        yield
    except AppError:
        raise
    except Exception as exc:
        raise InfrastructureError(message) from exc
