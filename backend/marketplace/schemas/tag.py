"""
Marketplace Backend — Tag Result Schema
========================================

What:  Structured outcome of deleteTag / updateTag.
How:   These two mutations never fail the request; success or failure is
       reported in this object instead.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

TAG_NOT_FOUND = "Tag not found"
TAG_DELETED = "Tag deleted successfully"
TAG_UPDATED = "Tag updated successfully"


class TagResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    success: bool = Field(description="Whether the mutation took effect")
    message: str = Field(description="Human-readable outcome")
    # The ORM Tag after an update; None for deletes and failures
    tag: Optional[Any] = Field(default=None)

    @classmethod
    def failure(cls, message: str) -> "TagResult":
        return cls(success=False, message=message)
