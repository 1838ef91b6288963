"""
DogPatch Backend - Dog Schemas
===============================

What:  Request/response models for the dog listing endpoints.

relative_birthday / relative_creation are offsets in seconds back from "now";
the service turns them into absolute datetimes when the listing is created.
breeder_rating is never accepted from the client: it is copied from the
seller.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_serializer

from dogpatch.models.dog import Gender


class DogCreate(BaseModel):
    about: str = Field(min_length=1)
    breed: str = Field(min_length=1)
    cost: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    gender: Gender
    image_url: str = Field(min_length=1, description="Image locator, e.g. from POST /dogs/images")
    name: str = Field(min_length=1)
    relative_birthday: float = Field(ge=0, description="Age of the dog in seconds")
    relative_creation: float = Field(
        default=0, ge=0, description="Seconds between listing time and now"
    )


class DogPublic(BaseModel):
    id: uuid.UUID
    seller_id: uuid.UUID
    about: str
    birthday: datetime
    breed: str
    breeder_rating: float = Field(description="Seller's average rating")
    cost: Decimal
    created: datetime
    gender: Gender
    image_url: str
    name: str

    model_config = {"from_attributes": True}

    @field_serializer("cost")
    def serialize_cost(self, cost: Decimal) -> float:
        # Clients read prices as JSON numbers
        return float(cost)


class ImageUploadResponse(BaseModel):
    """Returned by POST /api/v1/dogs/images."""
    image_url: str = Field(description="Public locator of the stored image")
