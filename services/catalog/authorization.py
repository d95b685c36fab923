from __future__ import annotations

from typing import Optional, Union
from uuid import UUID

from services.errors import AuthorizationError

Identifier = Union[UUID, str]


def is_owner(requester_id: Optional[Identifier], owner_id: Optional[Identifier]) -> bool:
    if requester_id is None or owner_id is None:
        return False
    return str(requester_id) == str(owner_id)


def ensure_owner(
    requester_id: Optional[Identifier],
    owner_id: Optional[Identifier],
    *,
    action: str = "modify",
) -> None:
    """Only the owning user may mutate a product."""
    if not is_owner(requester_id, owner_id):
        raise AuthorizationError(f"Access denied. You can only {action} your own products.")
