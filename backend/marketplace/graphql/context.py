"""
Marketplace Backend — GraphQL Request Context
==============================================

What:  The per-request object every resolver receives as `info.context`.
Holds: the request's AsyncSession, the authenticated Caller (or None), the
       session lock, and the relation loaders.
How:   `get_context` is the Strawberry context getter; FastAPI resolves its
       dependencies, so the session and caller come from the same
       `get_db_session` instance and the session commits when the request ends.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, TypeVar

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from marketplace.auth import Caller, get_current_caller
from marketplace.database import get_db_session
from marketplace.graphql.loaders import RelationLoaders

T = TypeVar("T")


class GraphQLContext(BaseContext):

    def __init__(self, session: AsyncSession, caller: Optional[Caller] = None):
        super().__init__()
        self.session = session
        self.caller = caller
        self.session_lock = asyncio.Lock()
        self.loaders = RelationLoaders(session, self.session_lock)

    async def call(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run `fn(session, *args)` while holding the session lock."""
        async with self.session_lock:
            return await fn(self.session, *args, **kwargs)


async def get_context(
    session: AsyncSession = Depends(get_db_session),
    caller: Optional[Caller] = Depends(get_current_caller),
) -> GraphQLContext:
    return GraphQLContext(session=session, caller=caller)
