"""
DogPatch Backend - Review Schemas
==================================

The rating range is not declared on ReviewCreate: the review aggregator owns
that rule and rejects out-of-range ratings with a ValidationError.
"""

import uuid

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    title: str
    details: str
    rating: float = Field(description="Rating from 1.0 to 5.0 inclusive")


class ReviewPublic(BaseModel):
    id: uuid.UUID
    reviewer_id: uuid.UUID
    seller_id: uuid.UUID
    title: str
    details: str
    rating: float

    model_config = {"from_attributes": True}
