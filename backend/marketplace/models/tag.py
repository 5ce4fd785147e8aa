"""
Marketplace Backend — Tag SQLAlchemy Model
===========================================

What:  ORM model for the `tags` table.
How:   Tags do not store their posts; Tag.posts is the reverse side of the
       `post_tags` association table declared next to Post. Deleting a Tag
       removes its association rows.
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.database import Base

if TYPE_CHECKING:
    from marketplace.models.post import Post


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    tagname: Mapped[str] = mapped_column(String(100), nullable=False)

    posts: Mapped[List["Post"]] = relationship(
        secondary="post_tags",
        back_populates="tags",
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, tagname='{self.tagname}')>"
