"""Domain models for wl_user — pure dataclasses, validated at construction."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from src.wl_common.datetime_utils import utc_now
from src.wl_common.enums import UserRole
from src.wl_common.errors import InvalidUserDataError

MIN_AGE_YEARS = 18
_PHONE_RE = re.compile(r"^\d{11}$")
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _clean_name(value: str, label: str) -> str:
    value = value.strip()
    if not 2 <= len(value) <= 100:
        raise InvalidUserDataError(f"{label} must be between 2 and 100 characters")
    return value


def _age_on(born: date, today: date) -> int:
    return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


@dataclass
class User:
    email: str
    first_name: str
    last_name: str
    phone_number: str
    date_of_birth: date
    password_hash: str
    role: UserRole = UserRole.CUSTOMER
    id: UUID = field(default_factory=uuid4)
    current_account_number: UUID | None = None
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        self.email = self.email.strip().lower()
        if not _EMAIL_RE.match(self.email):
            raise InvalidUserDataError(f"Invalid email address: {self.email}")
        self.first_name = _clean_name(self.first_name, "First name")
        self.last_name = _clean_name(self.last_name, "Last name")
        if not _PHONE_RE.match(self.phone_number):
            raise InvalidUserDataError("Phone number must be exactly 11 digits")
        if _age_on(self.date_of_birth, self.created_at.date()) < MIN_AGE_YEARS:
            raise InvalidUserDataError(f"User must be at least {MIN_AGE_YEARS} years old")

    @classmethod
    def restore(cls, **values: object) -> "User":
        """Rebuild a persisted user without re-running construction-time validation."""
        user = cls.__new__(cls)
        user.__dict__.update(values)
        return user

    def rename(self, first_name: str | None = None, last_name: str | None = None) -> None:
        if first_name is not None:
            self.first_name = _clean_name(first_name, "First name")
        if last_name is not None:
            self.last_name = _clean_name(last_name, "Last name")

    @property
    def is_customer(self) -> bool:
        return self.role is UserRole.CUSTOMER

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.MANAGER)
