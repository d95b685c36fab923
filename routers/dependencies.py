from __future__ import annotations

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.context import RequestContext
from infrastructure.database.database import get_db
from services.auth import AuthService
from services.catalog import ProductService

bearer_scheme = HTTPBearer(auto_error=False, description="Session token from /api/auth/login")


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db)


async def get_product_service(db: AsyncSession = Depends(get_db)) -> ProductService:
    return ProductService(db)


def bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    return credentials.credentials if credentials else None


async def get_request_context(
    token: Optional[str] = Depends(bearer_token),
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> RequestContext:
    """Resolve the caller from the bearer token; raises ``AuthError`` (401) otherwise."""
    user = await auth_service.verify_token(token)
    return RequestContext(db=db, user=user)
