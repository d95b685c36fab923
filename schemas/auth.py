from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from infrastructure.database.models.users import User

Username = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=30)]
ShopName = Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)]


class RegisterRequest(BaseModel):
    # Passwords are taken verbatim; only the identity fields are trimmed.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    username: Username
    email: EmailStr
    password: str = Field(..., min_length=6)
    shop_name: Optional[ShopName] = None


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserResponse(BaseModel):
    """Client-facing view of a user; the password hash is never included."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    username: str
    email: str
    shop_name: str
    created_at: datetime

    @classmethod
    def from_model(cls, user: "User") -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            shop_name=user.display_shop_name,
            created_at=user.created_at,
        )


class AuthData(BaseModel):
    user: UserResponse
    token: str


class CurrentUserData(BaseModel):
    user: UserResponse
