"""
Marketplace Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table.
Who:   UserService for CRUD; the Post and Comment models reference it.

Lifecycle:
    1. Created by the createUser mutation
    2. Updated by updateUser / addProfilePicture
    3. Deleted by deleteUser; owned Posts and authored Comments are kept,
       their owner/author reference is cleared by the ORM
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.database import Base
from marketplace.models.base import utcnow

if TYPE_CHECKING:
    from marketplace.models.comment import Comment
    from marketplace.models.post import Post


class User(Base):
    """A registered marketplace member (profile page owner)."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # ── Profile ───────────────────────────────────────────────────────────
    name: Mapped[Optional[str]] = mapped_column(
        String(120),
        nullable=True,
        comment="Display name shown on the profile page",
    )
    username: Mapped[str] = mapped_column(
        String(60),
        nullable=False,
        unique=True,
        comment="Public handle",
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    phone: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)

    # What: Reference (URL or storage key) to the profile picture.
    # Only the reference is stored; the image itself lives elsewhere.
    profile_picture: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # ── Relationships ─────────────────────────────────────────────────────
    posts: Mapped[List["Post"]] = relationship(
        back_populates="user",
        order_by="Post.created_at.desc()",
    )
    comments: Mapped[List["Comment"]] = relationship(
        back_populates="author",
        order_by="Comment.created_at",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
