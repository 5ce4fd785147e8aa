"""
Marketplace Backend — Comment SQLAlchemy Model
===============================================

What:  ORM model for the `comments` table.
How:   Both references are set when the Comment is created: `author_id`
       from the caller, `post_id` by appending the Comment to its Post's
       comment list.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.database import Base
from marketplace.models.base import utcnow

if TYPE_CHECKING:
    from marketplace.models.post import Post
    from marketplace.models.user import User


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    comment_text: Mapped[str] = mapped_column(Text, nullable=False)

    # Refreshed on every edit
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    author_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    post_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("posts.id", ondelete="SET NULL"),
        nullable=True,
    )

    author: Mapped[Optional["User"]] = relationship(back_populates="comments")
    post: Mapped[Optional["Post"]] = relationship(back_populates="comments")

    __table_args__ = (
        Index("idx_comments_author_id", "author_id"),
        Index("idx_comments_post_id", "post_id"),
    )

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, author_id={self.author_id}, post_id={self.post_id})>"
