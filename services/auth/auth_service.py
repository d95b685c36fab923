from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models.users import User
from infrastructure.database.repositories import UserRepository
from schemas.auth import RegisterRequest
from services.auth.security import TokenService, hash_password, verify_password
from services.errors import AuthError, ConflictError, validation_error_from

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(slots=True)
class AuthResult:
    user: User
    token: str


class AuthService:
    def __init__(
        self,
        db: Optional[AsyncSession],
        *,
        user_repository: UserRepository | None = None,
        token_service: TokenService | None = None,
    ) -> None:
        self.db = db
        self.user_repository = user_repository or UserRepository(db)
        self.token_service = token_service or TokenService()

    async def register(
        self,
        *,
        username: Optional[str],
        email: Optional[str],
        password: Optional[str],
        shop_name: Optional[str] = None,
    ) -> AuthResult:
        fields = {
            "username": username,
            "email": email.strip() if isinstance(email, str) else email,
            "password": password,
            "shop_name": shop_name or None,
        }
        try:
            request = RegisterRequest(**{key: value for key, value in fields.items() if value is not None})
        except PydanticValidationError as exc:
            raise validation_error_from(exc) from exc

        normalized_email = str(request.email).strip().lower()

        # The unique constraints are the real guard; these lookups give the
        # common case a clean message without a failed insert.
        if await self.user_repository.get_by_email(normalized_email):
            raise ConflictError("email")
        if await self.user_repository.get_by_username(request.username):
            raise ConflictError("username")

        user = await self.user_repository.create_user(
            username=request.username,
            email=normalized_email,
            password_hash=hash_password(request.password),
            shop_name=request.shop_name or None,
        )
        logger.info("Registered user %s (%s)", user.username, user.id)
        return AuthResult(user=user, token=self.token_service.create_access_token(user.id))

    async def login(self, *, email: Optional[str], password: Optional[str]) -> AuthResult:
        if not email or not password:
            raise AuthError(INVALID_CREDENTIALS)

        user = await self.user_repository.get_by_email(email.strip().lower())
        if user is None or not verify_password(password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)

        return AuthResult(user=user, token=self.token_service.create_access_token(user.id))

    async def verify_token(self, token: Optional[str]) -> User:
        """Validate the token and resolve the user it was issued for."""
        user_id = self.token_service.decode_token(token)
        user = await self.user_repository.get_by_id(user_id)
        if user is None:
            raise AuthError("Token is not valid")
        return user

    async def get_current_user(self, token: Optional[str]) -> User:
        return await self.verify_token(token)
