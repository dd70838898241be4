"""User cache keys and JSON codec."""

from datetime import date, datetime
from typing import Any
from uuid import UUID

from src.wl_common.enums import UserRole
from src.wl_user.domain.models import User

CUSTOMERS_KEY = "users:customers"


def user_key(user_id: UUID) -> str:
    return f"user:id:{user_id}"


def email_key(email: str) -> str:
    return f"user:email:{email.strip().lower()}"


def user_to_json(user: User) -> dict[str, Any]:
    return {
        "id": str(user.id),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone_number": user.phone_number,
        "date_of_birth": user.date_of_birth.isoformat(),
        "password_hash": user.password_hash,
        "role": user.role.name,
        "current_account_number": (
            str(user.current_account_number) if user.current_account_number else None
        ),
        "created_at": user.created_at.isoformat(),
    }


def user_from_json(data: dict[str, Any]) -> User:
    return User.restore(
        id=UUID(data["id"]),
        email=data["email"],
        first_name=data["first_name"],
        last_name=data["last_name"],
        phone_number=data["phone_number"],
        date_of_birth=date.fromisoformat(data["date_of_birth"]),
        password_hash=data["password_hash"],
        role=UserRole[data["role"]],
        current_account_number=(
            UUID(data["current_account_number"]) if data["current_account_number"] else None
        ),
        created_at=datetime.fromisoformat(data["created_at"]),
    )
