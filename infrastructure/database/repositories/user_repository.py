from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models.users import User
from services.errors import ConflictError

logger = logging.getLogger(__name__)

# Unique constraint name -> user-facing field name
UNIQUE_FIELDS = {
    "uq_users_email": "email",
    "uq_users_username": "username",
}


def conflict_field(exc: IntegrityError) -> Optional[str]:
    detail = str(getattr(exc, "orig", exc))
    for constraint, field in UNIQUE_FIELDS.items():
        if constraint in detail:
            return field
    return None


class UserRepository:
    """Credential store backed by the ``users`` table."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_user(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        shop_name: Optional[str],
    ) -> User:
        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            shop_name=shop_name,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(user)
                await self.db.flush()
        except IntegrityError as exc:
            field = conflict_field(exc)
            if field is None:
                raise
            logger.info("Rejected duplicate %s during registration", field)
            raise ConflictError(field) from exc
        return user

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()
