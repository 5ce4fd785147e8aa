"""
Marketplace Backend — Post Input Schemas
=========================================

What:  Payloads for createPost and updatePost.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    title: str = Field(description="Listing title")
    description: Optional[str] = Field(default=None, description="Listing body")
    price: Optional[float] = Field(default=None, description="Asking price")
    tags: List[str] = Field(default_factory=list, description="Tag ids")


class PostUpdate(BaseModel):
    """
    Partial update.

    A field that is absent (or null) keeps its stored value. `tags`, when
    given, replaces the whole tag list.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    tags: Optional[List[str]] = None

    def changes(self) -> dict:
        """Only the fields that carry a new value."""
        return self.model_dump(exclude_none=True)
