"""
Marketplace Backend — Service Helpers
======================================

What:  Id coercion, storage-error translation, and the caller gate shared by
       all services.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.auth import Caller
from marketplace.exceptions import DatabaseError, UnauthenticatedError, ValidationError

logger = logging.getLogger(__name__)

IdLike = Union[str, uuid.UUID]


def coerce_id(value: IdLike, field: str = "id") -> uuid.UUID:
    """
    Convert a GraphQL ID argument into a UUID.

    Raises:
        ValidationError: the value is not a UUID string
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(message=f"Invalid id '{value}'", field=field)


def require_caller(caller: Optional[Caller], action: str) -> Caller:
    """Reject the operation when the request has no authenticated caller."""
    if caller is None:
        raise UnauthenticatedError(action=action)
    return caller


@asynccontextmanager
async def storage_errors(db: AsyncSession, action: str, **context) -> AsyncIterator[None]:
    """
    Run the block inside a SAVEPOINT and translate driver failures into
    DatabaseError.

    Every field of a GraphQL document shares the request session, so a failing
    block rolls back only its own savepoint; work already reported to the
    client by earlier fields stays in the transaction. Any exception raised in
    the block, application errors included, discards the block's writes.
    Only SQLAlchemy errors are translated; the rest pass through untouched.

    ORM objects must be changed inside the block: entering it flushes pending
    state outside the savepoint.

    Usage:
        async with storage_errors(db, "load post", post_id=str(post_id)):
            post = await db.get(Post, post_id)
    """
    try:
        async with db.begin_nested():
            yield
    except SQLAlchemyError as e:
        logger.error("Storage error while trying to %s: %s", action, str(e), exc_info=True)
        raise DatabaseError(
            context={"action": action, "original_error": type(e).__name__, **context},
        ) from e
