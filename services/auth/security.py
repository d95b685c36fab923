from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from config import settings
from services.errors import AuthError


def hash_password(password: str) -> str:
    """Salted bcrypt hash, stored as text."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


class TokenService:
    """Issues and verifies signed, time-bound session tokens (HS256 JWT)."""

    def __init__(
        self,
        *,
        secret_key: str = settings.JWT_SECRET_KEY,
        algorithm: str = settings.JWT_ALGORITHM,
        expire_minutes: int = settings.JWT_EXPIRE_MINUTES,
    ) -> None:
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def create_access_token(self, user_id: UUID, expires_delta: Optional[timedelta] = None) -> str:
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.expire_minutes))
        claims: Dict[str, Any] = {"sub": str(user_id), "iat": now, "exp": expire}
        return jwt.encode(claims, self.secret_key, algorithm=self.algorithm)

    def decode_token(self, token: Optional[str]) -> UUID:
        """Return the user id asserted by ``token`` or raise ``AuthError``."""
        if not token:
            raise AuthError("No token, authorization denied")
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise AuthError("Token has expired") from exc
        except JWTError as exc:
            raise AuthError("Token is not valid") from exc

        subject = payload.get("sub")
        try:
            return UUID(str(subject))
        except (TypeError, ValueError) as exc:
            raise AuthError("Token is not valid") from exc
