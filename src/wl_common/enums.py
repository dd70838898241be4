"""Global enums — persisted by name, numeric values kept for external contracts."""

from enum import Enum, IntEnum


class AuditLogActionType(IntEnum):
    DEPOSIT = 0
    TRANSFER = 1
    CUSTOMER_CREATION = 10
    CUSTOMER_DELETION = 11
    CUSTOMER_ACCOUNT_CREATION = 20
    CUSTOMER_ACCOUNT_DELETION = 21
    ADMIN_DELETION = 30
    ADMIN_CREATION = 31
    ADMIN_CUSTOMER_DELETION = 32
    ADMIN_ACCOUNT_DELETION = 33
    ADMIN_ACCOUNT_ACTIVATION = 34
    ADMIN_ACCOUNT_DEACTIVATION = 35


class AuditLogStatus(IntEnum):
    FAILED = 0
    SUCCESS = 1


class UserRole(IntEnum):
    CUSTOMER = 0
    ADMIN = 1
    MANAGER = 2


class IsolationLevel(str, Enum):
    """Values accepted by SQLAlchemy's ``isolation_level`` execution option."""

    READ_COMMITTED = "READ COMMITTED"
    REPEATABLE_READ = "REPEATABLE READ"
    SERIALIZABLE = "SERIALIZABLE"
