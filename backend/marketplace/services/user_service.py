"""
Marketplace Backend — User Service
===================================

What:  Storage operations for Users.
Who:   Query.user / Query.users, the user mutations, and the Post.user and
       Comment.commentAuthor relation loaders.

Query plan for `get_user(..., with_relations=True)`:
    SELECT * FROM users WHERE id = :id
    SELECT * FROM posts WHERE user_id IN (:id)       (selectinload)
    SELECT * FROM comments WHERE author_id IN (:id)  (selectinload)
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from marketplace.exceptions import NotFoundError, ValidationError
from marketplace.models.user import User
from marketplace.schemas.user import UserCreate, UserUpdate
from marketplace.services.base import IdLike, coerce_id, storage_errors

logger = logging.getLogger(__name__)

# Columns a partial update may leave out but never clear
REQUIRED_FIELDS = ("username", "email")


class UserService:
    """
    Business logic layer for users.

    Missing users are reported as None everywhere except add_profile_picture,
    which cannot proceed without a record and raises NotFoundError.
    """

    async def get_user(
        self,
        db: AsyncSession,
        user_id: IdLike,
        with_relations: bool = False,
    ) -> Optional[User]:
        """
        Fetch one User by id.

        Args:
            with_relations: also load the User's posts and comments
                            (one extra round trip each)

        Returns:
            The User, or None if no record has that id
        """
        uid = coerce_id(user_id)
        query = select(User).where(User.id == uid)
        if with_relations:
            # Rows already in the session get their collections reloaded too
            query = query.options(
                selectinload(User.posts), selectinload(User.comments)
            ).execution_options(populate_existing=True)

        async with storage_errors(db, "load user", user_id=str(uid)):
            result = await db.execute(query)
            return result.scalar_one_or_none()

    async def list_users(self, db: AsyncSession) -> List[User]:
        """All users, unfiltered and unpaginated."""
        async with storage_errors(db, "list users"):
            result = await db.execute(select(User).order_by(User.created_at))
            return list(result.scalars().all())

    async def create_user(self, db: AsyncSession, data: UserCreate) -> User:
        user = User(**data.model_dump())
        async with storage_errors(db, "create user", username=data.username):
            db.add(user)
            await db.flush()
        logger.info("User created: %s (%s)", user.id, user.username)
        return user

    async def update_user(
        self,
        db: AsyncSession,
        user_id: IdLike,
        data: UserUpdate,
    ) -> Optional[User]:
        """
        Apply a partial update; only fields the client sent are written.

        Raises:
            ValidationError: username or email sent as null

        Returns:
            The updated User, or None if it does not exist
        """
        user = await self.get_user(db, user_id)
        if user is None:
            return None

        changes = data.model_dump(exclude_unset=True)
        for field in REQUIRED_FIELDS:
            if field in changes and changes[field] is None:
                raise ValidationError(message=f"{field} cannot be null", field=field)

        async with storage_errors(db, "update user", user_id=str(user.id)):
            for field, value in changes.items():
                setattr(user, field, value)
            await db.flush()
        return user

    async def delete_user(self, db: AsyncSession, user_id: IdLike) -> Optional[User]:
        """
        Remove a User.

        Owned posts and authored comments stay; their reference to this user
        is cleared.

        Returns:
            The removed User, or None if it did not exist
        """
        user = await self.get_user(db, user_id)
        if user is None:
            return None

        async with storage_errors(db, "delete user", user_id=str(user.id)):
            await db.delete(user)
            await db.flush()
        logger.info("User deleted: %s", user.id)
        return user

    async def add_profile_picture(
        self,
        db: AsyncSession,
        user_id: IdLike,
        picture: str,
    ) -> User:
        """
        Overwrite the User's profile picture reference.

        Raises:
            NotFoundError: no User has that id
        """
        user = await self.get_user(db, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        async with storage_errors(db, "save profile picture", user_id=str(user.id)):
            user.profile_picture = picture
            await db.flush()
        return user


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
