"""
DogPatch Backend - User SQLAlchemy Model
=========================================

What:  ORM model for the `users` table. Every user can both buy and sell:
       a "seller" is simply the user a dog or a review points at.
Who:   Used by the user and review services, the auth dependency, and seeding.

Table Design Rationale:
    - email: stored trimmed and lowercased, unique. Case-insensitive
      uniqueness therefore reduces to a plain unique constraint.
    - password: bcrypt hash only.
    - review_count / review_rating_average: denormalized seller stats,
      maintained exclusively by the review aggregator. The pair is the
      stored form of the tagged rating state in `dogpatch.models.rating`.
"""

import uuid
from typing import TYPE_CHECKING, List

from sqlalchemy import Float, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dogpatch.database import Base
from dogpatch.models.rating import (
    DEFAULT_REVIEW_VALUE,
    RatingState,
    Rated,
    rating_state,
)

if TYPE_CHECKING:
    from dogpatch.models.dog import Dog


class User(Base):
    """
    Lifecycle:
        1. Registered with review_count = 0 and the default average
        2. Profile fields change through partial updates
        3. Each accepted review bumps review_count and moves the average
        4. Never deleted
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    about: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        comment="Trimmed, lowercased login email",
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="bcrypt hash",
    )

    profile_image_url: Mapped[str | None] = mapped_column(
        String(2048), nullable=True, default=None
    )

    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    review_rating_average: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=DEFAULT_REVIEW_VALUE,
        comment="Running mean of received ratings; default value while review_count = 0",
    )

    dogs: Mapped[List["Dog"]] = relationship(back_populates="seller", lazy="raise")

    @property
    def rating(self) -> RatingState:
        return rating_state(self.review_count, self.review_rating_average)

    def apply_rating(self, state: Rated) -> None:
        self.review_count = state.count
        self.review_rating_average = state.average

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', reviews={self.review_count})>"
