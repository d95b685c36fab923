from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from infrastructure.database.models.users import User


@dataclass
class RequestContext:
    """Per-request state handed to services instead of module-level globals."""

    db: "AsyncSession"
    user: "User"

    @property
    def user_id(self) -> UUID:
        return self.user.id
