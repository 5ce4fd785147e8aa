"""
Marketplace Backend — Post SQLAlchemy Model
============================================

What:  ORM model for the `posts` table (a product listing) and the
       `post_tags` association table.

Relationships:
    Post.user      → owning User (posts.user_id)
    Post.tags      ↔ Tag, many-to-many through post_tags
    Post.comments  → the Post's comment list (comments.post_id)

Query Patterns:
    - Posts of an owner:  WHERE user_id = :user_id   (idx_posts_user_id)
    - Posts with a tag:   JOIN post_tags WHERE tag_id = :tag_id
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.database import Base
from marketplace.models.base import utcnow

if TYPE_CHECKING:
    from marketplace.models.comment import Comment
    from marketplace.models.tag import Tag
    from marketplace.models.user import User


post_tags = Table(
    "post_tags",
    Base.metadata,
    Column("post_id", Uuid, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Post(Base):
    """A product listing owned by one User."""

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    # Owner reference; cleared (not cascaded) when the User is deleted
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # ── Relationships ─────────────────────────────────────────────────────
    user: Mapped[Optional["User"]] = relationship(back_populates="posts")
    tags: Mapped[List["Tag"]] = relationship(
        secondary=post_tags,
        back_populates="posts",
    )
    comments: Mapped[List["Comment"]] = relationship(back_populates="post")

    __table_args__ = (
        Index("idx_posts_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}')>"
