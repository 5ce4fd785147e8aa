"""
Marketplace Backend — ORM Models
=================================

One table per record collection, plus the Post↔Tag association table.
Importing this package registers every model on `Base.metadata`.
"""

from marketplace.models.comment import Comment
from marketplace.models.post import Post, post_tags
from marketplace.models.tag import Tag
from marketplace.models.user import User

__all__ = ["Comment", "Post", "Tag", "User", "post_tags"]
