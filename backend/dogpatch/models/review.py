"""
DogPatch Backend - Review SQLAlchemy Model
===========================================

What:  ORM model for the `reviews` table.
When:  Rows are inserted only by ReviewAggregator.record_review(), in the
       same transaction that moved the seller's average. There is no update
       or delete path.
"""

import uuid

from sqlalchemy import Float, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dogpatch.database import Base


class Review(Base):
    __tablename__ = "reviews"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, comment="Author of the review"
    )
    seller_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, comment="User being reviewed"
    )

    rating: Mapped[float] = mapped_column(Float, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("idx_reviews_seller_id", "seller_id"),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, seller_id={self.seller_id}, rating={self.rating})>"
