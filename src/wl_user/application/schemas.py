"""Pydantic schemas shared by the customer and admin facades."""

import re
from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from src.wl_user.domain.models import User


class NewUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    first_name: str = Field(..., min_length=2, max_length=100)
    last_name: str = Field(..., min_length=2, max_length=100)
    phone_number: str = Field(..., pattern=r"^\d{11}$")
    date_of_birth: date

    @field_validator("password")
    @classmethod
    def password_complexity(cls, v: str) -> str:
        """Enforce: at least one uppercase, one lowercase, one digit."""
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"\d", v):
            raise ValueError("Password must contain at least one digit")
        return v


class RegisterRequest(NewUserRequest):
    pass


class CreateAdminRequest(NewUserRequest):
    pass


class UpdateProfileRequest(BaseModel):
    first_name: str | None = Field(None, min_length=2, max_length=100)
    last_name: str | None = Field(None, min_length=2, max_length=100)


class UserView(BaseModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    phone_number: str
    date_of_birth: date
    role: str
    current_account_number: UUID | None
    created_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserView":
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            phone_number=user.phone_number,
            date_of_birth=user.date_of_birth,
            role=user.role.name,
            current_account_number=user.current_account_number,
            created_at=user.created_at,
        )
