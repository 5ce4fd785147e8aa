"""
Marketplace Backend — Relation Loaders
=======================================

What:  The seam between relationship field resolvers and the services.
How:   Each relationship field (User.posts, Post.comments, ...) asks a
       `RelationLoader` for the records related to one parent key. The
       loader shipped here, `PerKeyLoader`, performs one service call per key,
       i.e. one storage round trip per requested field per returned entity.
       A batching implementation only has to provide `load`;
       resolvers and the schema do not change.
Who:   Built once per request by GraphQLContext.

graphql-core resolves sibling fields and list items concurrently, but an
AsyncSession runs one statement at a time. Every loader call therefore holds
the request's session lock for the duration of its storage round trip.
"""

import asyncio
from typing import Any, Awaitable, Callable, Generic, List, Optional, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.services.comment_service import comment_service
from marketplace.services.post_service import post_service
from marketplace.services.tag_service import tag_service
from marketplace.services.user_service import user_service

K = TypeVar("K")
V = TypeVar("V")


class RelationLoader(Generic[K, V]):
    """Interface: related records for a parent key."""

    async def load(self, key: K) -> V:
        raise NotImplementedError


class PerKeyLoader(RelationLoader[K, V]):
    """Unbatched loader: calls `fetch(session, key)` once for every key."""

    def __init__(
        self,
        session: AsyncSession,
        lock: asyncio.Lock,
        fetch: Callable[[AsyncSession, K], Awaitable[V]],
    ):
        self.session = session
        self.lock = lock
        self.fetch = fetch

    async def load(self, key: K) -> V:
        async with self.lock:
            return await self.fetch(self.session, key)


class RelationLoaders:
    """The per-request set of loaders, one per relationship field."""

    def __init__(self, session: AsyncSession, lock: asyncio.Lock):
        def per_key(fetch) -> PerKeyLoader:
            return PerKeyLoader(session, lock, fetch)

        self.user_by_id: RelationLoader[str, Optional[Any]] = per_key(user_service.get_user)
        self.post_by_id: RelationLoader[str, Optional[Any]] = per_key(post_service.get_post)
        self.posts_by_owner: RelationLoader[str, List[Any]] = per_key(
            post_service.list_posts_by_owner
        )
        self.posts_by_tag: RelationLoader[str, List[Any]] = per_key(
            post_service.list_posts_by_tag
        )
        self.tags_by_post: RelationLoader[str, List[Any]] = per_key(
            tag_service.list_tags_for_post
        )
        self.comments_by_author: RelationLoader[str, List[Any]] = per_key(
            comment_service.list_comments_by_author
        )
        self.comments_by_post: RelationLoader[str, List[Any]] = per_key(
            comment_service.list_comments_by_post
        )
