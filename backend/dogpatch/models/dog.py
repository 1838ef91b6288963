"""
DogPatch Backend - Dog SQLAlchemy Model
========================================

What:  ORM model for the `dogs` table (one listing per dog for sale).

Table Design Rationale:
    - seller_id: owning user; set at creation and never reassigned.
    - breeder_rating: copy of the seller's review_rating_average. Snapshotted
      when the listing is created and rewritten by every review cascade, so
      listing reads never join against users.
    - cost: NUMERIC(10, 2); prices are money, not floats.
    - created: listing time, possibly backdated by the client through
      relative_creation. The dog index is ordered by it.
"""

import enum
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Index, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dogpatch.database import Base

if TYPE_CHECKING:
    from dogpatch.models.user import User


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"


class Dog(Base):
    __tablename__ = "dogs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        comment="Owning seller; immutable after creation",
    )

    about: Mapped[str] = mapped_column(Text, nullable=False)
    birthday: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    breed: Mapped[str] = mapped_column(String(255), nullable=False)

    breeder_rating: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Mirror of users.review_rating_average for seller_id",
    )

    cost: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    gender: Mapped[Gender] = mapped_column(
        Enum(Gender, name="dog_gender", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    image_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    seller: Mapped["User"] = relationship(back_populates="dogs", lazy="raise")

    # seller_id: the review cascade loads every dog of one seller
    # created: the public index is sorted by it
    __table_args__ = (
        Index("idx_dogs_seller_id", "seller_id"),
        Index("idx_dogs_created", "created"),
    )

    def __repr__(self) -> str:
        return f"<Dog(id={self.id}, name='{self.name}', seller_id={self.seller_id})>"
