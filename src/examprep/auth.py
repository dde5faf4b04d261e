"""Request identity: a stand-in for the external session collaborator."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException

USER_HEADER = "X-User-Id"


@dataclass(frozen=True, slots=True)
class User:
    id: str
    display_name: Optional[str] = None


async def current_user(x_user_id: Optional[str] = Header(None, alias=USER_HEADER)) -> User:
    """Resolve the calling user from the ``X-User-Id`` header, or reply 401."""

    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return User(id=user_id)


__all__ = ["USER_HEADER", "User", "current_user"]
