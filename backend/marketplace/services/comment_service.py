"""
Marketplace Backend — Comment Service
======================================

What:  Storage operations for Comments.
Who:   Query.getComment / Query.getAllComments, the comment mutations, and
       the User.comments and Post.comments relation loaders.

Mutation gate (checked in this order, nothing is written on rejection):
    1. No caller                          → UnauthenticatedError
    2. Post (create) / Comment missing    → NotFoundError
    3. Caller is not the comment's author → ForbiddenError   (update/delete)

createComment flow:
    ┌──────────┐    ┌──────────────┐    ┌──────────────────────┐
    │ Load Post│───▶│ New Comment  │───▶│ Append to            │
    │ + comments│   │ author=caller│    │ post.comments, flush │
    └──────────┘    │ created=now  │    └──────────────────────┘
                    └──────────────┘
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.auth import Caller
from marketplace.exceptions import ForbiddenError, NotFoundError
from marketplace.models.base import utcnow
from marketplace.models.comment import Comment
from marketplace.models.post import Post
from marketplace.services.base import IdLike, coerce_id, require_caller, storage_errors

logger = logging.getLogger(__name__)


class CommentService:

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_comment(self, db: AsyncSession, comment_id: IdLike) -> Optional[Comment]:
        cid = coerce_id(comment_id)
        async with storage_errors(db, "load comment", comment_id=str(cid)):
            return await db.get(Comment, cid)

    async def list_comments(self, db: AsyncSession) -> List[Comment]:
        async with storage_errors(db, "list comments"):
            result = await db.execute(select(Comment).order_by(Comment.created_at))
            return list(result.scalars().all())

    async def list_comments_by_author(self, db: AsyncSession, user_id: IdLike) -> List[Comment]:
        uid = coerce_id(user_id)
        query = select(Comment).where(Comment.author_id == uid).order_by(Comment.created_at)
        async with storage_errors(db, "list comments of user", user_id=str(uid)):
            result = await db.execute(query)
            return list(result.scalars().all())

    async def list_comments_by_post(self, db: AsyncSession, post_id: IdLike) -> List[Comment]:
        pid = coerce_id(post_id)
        query = select(Comment).where(Comment.post_id == pid).order_by(Comment.created_at)
        async with storage_errors(db, "list comments of post", post_id=str(pid)):
            result = await db.execute(query)
            return list(result.scalars().all())

    # ── Writes ────────────────────────────────────────────────────────────

    async def _authored_comment(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        comment_id: IdLike,
        action: str,
    ) -> Comment:
        caller = require_caller(caller, f"{action} a comment")

        comment = await self.get_comment(db, comment_id)
        if comment is None:
            raise NotFoundError(resource="comment", resource_id=str(comment_id))
        if not caller.owns(comment.author_id):
            raise ForbiddenError(f"You can only {action} your own comments.")
        return comment

    async def create_comment(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        post_id: IdLike,
        comment_text: str,
    ) -> Comment:
        """
        Create a Comment by the caller on a Post.

        The Comment's post reference is set and it is appended to the Post's
        comment list in the same flush.

        Raises:
            UnauthenticatedError: no caller
            NotFoundError: the Post does not exist
            DatabaseError: a storage call failed
        """
        caller = require_caller(caller, "create a comment")

        pid = coerce_id(post_id, field="postId")
        query = select(Post).where(Post.id == pid).options(selectinload(Post.comments))
        async with storage_errors(db, "load post", post_id=str(pid)):
            result = await db.execute(query)
            post = result.scalar_one_or_none()

        if post is None:
            raise NotFoundError(resource="post", resource_id=str(pid))

        async with storage_errors(db, "create comment", post_id=str(pid)):
            comment = Comment(
                comment_text=comment_text,
                author_id=coerce_id(caller.id),
                created_at=utcnow(),
            )
            db.add(comment)
            post.comments.append(comment)
            await db.flush()

        logger.info("Comment %s created on post %s by %s", comment.id, post.id, caller.id)
        return comment

    async def update_comment(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        comment_id: IdLike,
        comment_text: str,
    ) -> Comment:
        """Replace the text of the caller's Comment and refresh its timestamp."""
        comment = await self._authored_comment(db, caller, comment_id, "update")

        async with storage_errors(db, "update comment", comment_id=str(comment.id)):
            comment.comment_text = comment_text
            comment.created_at = utcnow()
            await db.flush()
        return comment

    async def delete_comment(
        self,
        db: AsyncSession,
        caller: Optional[Caller],
        comment_id: IdLike,
    ) -> Comment:
        """Remove the caller's Comment and return it."""
        comment = await self._authored_comment(db, caller, comment_id, "delete")

        async with storage_errors(db, "delete comment", comment_id=str(comment.id)):
            await db.delete(comment)
            await db.flush()
        logger.info("Comment deleted: %s", comment.id)
        return comment


comment_service = CommentService()
