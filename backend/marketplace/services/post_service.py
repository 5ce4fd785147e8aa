"""
Marketplace Backend — Post Service
===================================

What:  Storage operations for Posts (product listings).
Who:   Query.posts / Query.post, the post mutations, and the User.posts,
       Tag.posts and Comment.post relation loaders.

Ownership:
    createPost records the caller as owner. updatePost and deletePost require
    a caller, an existing Post, and that the caller owns it:

        no caller        → UnauthenticatedError
        unknown post id  → NotFoundError
        not the owner    → ForbiddenError
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.auth import Caller
from marketplace.exceptions import ForbiddenError, NotFoundError
from marketplace.models.post import Post, post_tags
from marketplace.models.tag import Tag
from marketplace.schemas.post import PostCreate, PostUpdate
from marketplace.services.base import IdLike, coerce_id, require_caller, storage_errors

logger = logging.getLogger(__name__)


class PostService:

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_post(
        self,
        db: AsyncSession,
        post_id: IdLike,
        with_owner: bool = False,
    ) -> Optional[Post]:
        """
        Fetch one Post by id.

        Args:
            with_owner: also load the owning User (second round trip)

        Returns:
            The Post, or None if it does not exist
        """
        pid = coerce_id(post_id)
        query = select(Post).where(Post.id == pid)
        if with_owner:
            query = query.options(selectinload(Post.user)).execution_options(
                populate_existing=True
            )

        async with storage_errors(db, "load post", post_id=str(pid)):
            result = await db.execute(query)
            return result.scalar_one_or_none()

    async def list_posts(self, db: AsyncSession) -> List[Post]:
        """All posts, newest first, each with its owner loaded."""
        query = (
            select(Post)
            .options(selectinload(Post.user))
            .order_by(Post.created_at.desc())
            .execution_options(populate_existing=True)
        )
        async with storage_errors(db, "list posts"):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def list_posts_by_owner(self, db: AsyncSession, user_id: IdLike) -> List[Post]:
        uid = coerce_id(user_id)
        query = select(Post).where(Post.user_id == uid).order_by(Post.created_at.desc())
        async with storage_errors(db, "list posts of user", user_id=str(uid)):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def list_posts_by_tag(self, db: AsyncSession, tag_id: IdLike) -> List[Post]:
        """Posts whose tag list contains the Tag; empty when none do."""
        tid = coerce_id(tag_id, field="tagId")
        query = (
            select(Post)
            .join(post_tags, post_tags.c.post_id == Post.id)
            .where(post_tags.c.tag_id == tid)
            .order_by(Post.created_at.desc())
        )
        async with storage_errors(db, "list posts of tag", tag_id=str(tid)):
            result = await db.execute(query)
            return list(result.scalars().all())

    # ── Writes ────────────────────────────────────────────────────────────

    async def _load_tags(self, db: AsyncSession, tag_ids: List[str]) -> List[Tag]:
        """Resolve tag ids; unknown ids are an error, not silently dropped."""
        ids = [coerce_id(t, field="tags") for t in tag_ids]
        if not ids:
            return []
        async with storage_errors(db, "load tags"):
            result = await db.execute(select(Tag).where(Tag.id.in_(ids)))
            tags = list(result.scalars().all())

        missing = set(ids) - {tag.id for tag in tags}
        if missing:
            raise NotFoundError(resource="tag", resource_id=str(sorted(missing, key=str)[0]))
        return tags

    async def _owned_post(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        post_id: IdLike,
        action: str,
    ) -> Post:
        caller = require_caller(caller, f"{action} a post")

        pid = coerce_id(post_id)
        query = select(Post).where(Post.id == pid).options(selectinload(Post.tags))
        async with storage_errors(db, "load post", post_id=str(pid)):
            result = await db.execute(query)
            post = result.scalar_one_or_none()

        if post is None:
            raise NotFoundError(resource="post", resource_id=str(pid))
        if not caller.owns(post.user_id):
            raise ForbiddenError(f"You can only {action} your own posts.")
        return post

    async def create_post(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        data: PostCreate,
    ) -> Post:
        """
        Create a Post owned by the caller.

        Raises:
            UnauthenticatedError: no caller
            NotFoundError: one of the tag ids does not exist
        """
        caller = require_caller(caller, "create a post")
        tags = await self._load_tags(db, data.tags)

        async with storage_errors(db, "create post", title=data.title):
            post = Post(
                title=data.title,
                description=data.description,
                price=data.price,
                user_id=coerce_id(caller.id),
                tags=tags,
            )
            db.add(post)
            await db.flush()
        logger.info("Post created: %s by %s", post.id, caller.id)
        return post

    async def update_post(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        post_id: IdLike,
        data: PostUpdate,
    ) -> Post:
        """
        Apply the supplied fields to a Post the caller owns.

        Tag ids are resolved before anything is written, so an unknown tag
        leaves the Post untouched.
        """
        post = await self._owned_post(db, caller, post_id, "update")

        changes = data.changes()
        tag_ids = changes.pop("tags", None)
        tags = await self._load_tags(db, tag_ids) if tag_ids is not None else None

        async with storage_errors(db, "update post", post_id=str(post.id)):
            for field, value in changes.items():
                setattr(post, field, value)
            if tags is not None:
                post.tags = tags
            await db.flush()
        return post

    async def delete_post(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        post_id: IdLike,
    ) -> Post:
        """Remove a Post the caller owns; its comments stay, detached."""
        post = await self._owned_post(db, caller, post_id, "delete")

        async with storage_errors(db, "delete post", post_id=str(post.id)):
            await db.delete(post)
            await db.flush()
        logger.info("Post deleted: %s", post.id)
        return post


post_service = PostService()
