"""
Marketplace Backend — User Input Schemas
=========================================

What:  Payloads for the createUser and updateUser mutations.
How:   UserUpdate is partial; the service applies only the fields the client
       actually sent (`model_dump(exclude_unset=True)`).
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Fields accepted when registering a User."""

    username: str = Field(description="Public handle")
    email: str = Field(description="Contact email")
    name: Optional[str] = Field(default=None, description="Display name")
    phone: Optional[str] = Field(default=None, description="Contact phone number")
    profile_picture: Optional[str] = Field(
        default=None,
        description="Reference to the profile picture",
    )


class UserUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value."""

    username: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    profile_picture: Optional[str] = None
