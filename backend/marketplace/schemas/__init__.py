"""
Marketplace Backend — Pydantic Contracts
=========================================

What:  Pydantic models describing service inputs and structured results.
How:   GraphQL input objects are converted to these models at the boundary;
       services never see Strawberry types.
"""

from marketplace.schemas.health import HealthResponse
from marketplace.schemas.post import PostCreate, PostUpdate
from marketplace.schemas.tag import TagResult
from marketplace.schemas.user import UserCreate, UserUpdate

__all__ = [
    "HealthResponse",
    "PostCreate",
    "PostUpdate",
    "TagResult",
    "UserCreate",
    "UserUpdate",
]
