"""
DogPatch Backend - User & Token Schemas
========================================

What:  Pydantic models for the user endpoints' request bodies and responses.

UserUpdate is a sparse update: the service applies exactly the fields the
client sent (``model_dump(exclude_unset=True)``). A field that is absent is
left alone; a field sent as "" is stored as "".
"""

import uuid
from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """
    Body of POST /api/v1/users.

    Fields are not length-checked here: the service reports every missing
    field with one message, matching what clients already handle.
    """
    email: str = Field(default="", description="Login email (case-insensitive)")
    name: str = Field(default="", description="Display name")
    password: str = Field(default="", description="Plaintext password; hashed before storage")
    about: Optional[str] = Field(default=None, description="Free-text seller biography")
    profile_image_url: Optional[str] = Field(default=None, description="Profile image URL")


class UserUpdate(BaseModel):
    """Body of PUT /api/v1/users. Only the fields present are applied."""
    about: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None
    profile_image_url: Optional[str] = None


class UserPublic(BaseModel):
    """
    What:  Public representation of a user.
    Why:   Never exposes the password hash.
    """
    id: uuid.UUID
    about: Optional[str] = None
    email: str
    name: str
    profile_image_url: Optional[str] = None
    review_count: int = Field(description="Number of reviews received")
    review_rating_average: float = Field(
        description="Mean received rating, or the default value when review_count is 0"
    )

    model_config = {"from_attributes": True}


class TokenPublic(BaseModel):
    """Returned by POST /api/v1/users/login."""
    token: str = Field(description="Opaque bearer token for the Authorization header")
    user_id: uuid.UUID

    model_config = {"from_attributes": True}
