"""
Marketplace Backend — Caller Resolution
========================================

What:  Resolves the authenticated caller, if any, for a request.
How:   The session/auth layer in front of this service forwards the signed-in
       user's id in a header (settings.caller_header, `X-User-ID` by default).
       If that id names an existing User the request gets a Caller; otherwise
       it is anonymous. Nothing here issues or verifies credentials.
Who:   The GraphQL context getter depends on `get_current_caller`; services
       receive the resulting Caller as an explicit argument.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.config import settings
from marketplace.database import get_db_session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Caller:
    """The authenticated user on whose behalf an operation runs."""

    id: str
    username: Optional[str] = None

    def owns(self, owner_id: Optional[uuid.UUID]) -> bool:
        return owner_id is not None and str(owner_id) == self.id


async def resolve_caller(db: AsyncSession, raw_id: Optional[str]) -> Optional[Caller]:
    """Look up the User named by `raw_id`; None when absent or unknown."""
    if not raw_id:
        return None
    try:
        user_id = uuid.UUID(raw_id.strip())
    except ValueError:
        logger.warning("Ignoring malformed caller id %r", raw_id)
        return None

    from marketplace.models.user import User

    user = await db.get(User, user_id)
    if user is None:
        logger.info("Caller id %s does not match any user", user_id)
        return None
    return Caller(id=str(user.id), username=user.username)


async def get_current_caller(
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> Optional[Caller]:
    """FastAPI dependency: the request's caller, or None when anonymous."""
    return await resolve_caller(db, request.headers.get(settings.caller_header))
