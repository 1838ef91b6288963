"""
DogPatch Backend - Review Aggregator
=====================================

What:  Records a review of a seller and keeps every derived rating in step.
How:   One review moves three things, all inside a single transaction:

           users.review_count / users.review_rating_average   (the seller)
           dogs.breeder_rating          (every dog the seller owns)
           reviews                      (the new row)

       The average is folded forward with the incremental mean in
       `dogpatch.models.rating.combine`.
Who:   Called by POST /api/v1/users/{seller_id}/reviews.

Isolation:
    ┌─────────────────────┐    ┌──────────────────────┐    ┌──────────┐
    │  per-seller         │───▶│  SELECT seller       │───▶│  COMMIT  │
    │  asyncio.Lock       │    │  FOR UPDATE, cascade │    │          │
    └─────────────────────┘    └──────────────────────┘    └──────────┘

    The asyncio lock serializes reviews of one seller inside this process;
    the row lock does the same across processes on PostgreSQL (SQLite has no
    row locks and relies on the process lock). The commit happens before the
    lock is released, so the next review always reads the committed
    (review_count, review_rating_average) pair. DogService.create_dog takes
    the same lock, so a new listing never snapshots a stale average.
    Reviews of different sellers never share a lock.

    Any SQLAlchemyError rolls the whole unit back: the seller, the dogs and
    the review are written together or not at all.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dogpatch.exceptions import NotFoundError, PersistenceError, ValidationError
from dogpatch.models.dog import Dog
from dogpatch.models.rating import (
    MAX_REVIEW_VALUE,
    MIN_REVIEW_VALUE,
    combine,
    is_valid_rating,
)
from dogpatch.models.review import Review
from dogpatch.models.user import User

logger = logging.getLogger(__name__)


class SellerLocks:
    """
    Registry of one asyncio.Lock per seller id.

    An entry lives only while some task holds or waits on it, so the
    registry stays as small as the number of sellers under review right now.
    """

    def __init__(self):
        self._locks: Dict[UUID, asyncio.Lock] = {}
        self._waiters: Dict[UUID, int] = {}

    @asynccontextmanager
    async def hold(self, seller_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.get(seller_id)
        if lock is None:
            lock = self._locks[seller_id] = asyncio.Lock()
            self._waiters[seller_id] = 0
        self._waiters[seller_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._waiters[seller_id] -= 1
            if self._waiters[seller_id] == 0:
                del self._waiters[seller_id]
                del self._locks[seller_id]

    def __len__(self) -> int:
        return len(self._locks)


class ReviewAggregator:
    """
    Owns the only write path into `reviews`.

    Like DogService.create_dog, record_review() commits on its own: the
    transaction has to end while the seller lock is still held.
    """

    def __init__(self):
        self.locks = SellerLocks()

    async def record_review(
        self,
        db: AsyncSession,
        seller_id: UUID,
        reviewer_id: UUID,
        rating: float,
        title: str,
        details: str,
    ) -> Review:
        """
        Record one review and cascade the seller's new average.

        Steps (inside the seller lock, one transaction):
            1. Re-read the seller row with FOR UPDATE
            2. Fold the rating into the seller's state and flush
            3. Copy the new average onto every dog the seller owns
            4. Insert the review
            5. Commit

        Raises:
            ValidationError: rating outside [1.0, 5.0] (nothing is read or written)
            NotFoundError: no seller with `seller_id`
            PersistenceError: the store failed; the transaction was rolled back
        """
        if not is_valid_rating(rating):
            raise ValidationError(
                message=f"Rating must be between {MIN_REVIEW_VALUE} and {MAX_REVIEW_VALUE}",
                field="rating",
                context={"rating": rating},
            )

        async with self.locks.hold(seller_id):
            try:
                # populate_existing: never trust a copy already in the identity map
                result = await db.execute(
                    select(User)
                    .where(User.id == seller_id)
                    .with_for_update()
                    .execution_options(populate_existing=True)
                )
                seller = result.scalar_one_or_none()
                if seller is None:
                    raise NotFoundError(resource="seller", resource_id=str(seller_id))

                state = combine(seller.rating, rating)
                seller.apply_rating(state)
                await db.flush()

                dogs = await db.execute(
                    select(Dog)
                    .where(Dog.seller_id == seller.id)
                    .execution_options(populate_existing=True)
                )
                cascaded = 0
                for dog in dogs.scalars():
                    dog.breeder_rating = state.average
                    cascaded += 1

                review = Review(
                    reviewer_id=reviewer_id,
                    seller_id=seller.id,
                    rating=rating,
                    title=title,
                    details=details,
                )
                db.add(review)
                await db.commit()

            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(
                    "Review of seller %s rolled back: %s", seller_id, str(e), exc_info=True
                )
                raise PersistenceError(
                    context={"seller_id": str(seller_id), "error_type": type(e).__name__}
                )

        logger.info(
            "Review %s recorded for seller %s: count=%d average=%.4f dogs=%d",
            review.id,
            seller_id,
            state.count,
            state.average,
            cascaded,
        )
        return review

    async def list_seller_reviews(self, db: AsyncSession, seller_id: UUID) -> List[Review]:
        """
        Reviews received by a seller.

        Raises:
            NotFoundError: no seller with `seller_id`
            PersistenceError: query failed
        """
        try:
            seller = await db.get(User, seller_id)
            if seller is None:
                raise NotFoundError(resource="seller", resource_id=str(seller_id))

            result = await db.execute(select(Review).where(Review.seller_id == seller_id))
            return list(result.scalars().all())

        except SQLAlchemyError as e:
            logger.error("Database error listing reviews for %s: %s", seller_id, str(e))
            raise PersistenceError(context={"seller_id": str(seller_id)})


# ── Singleton Instance ────────────────────────────────────────────────────
# One lock registry per process
review_aggregator = ReviewAggregator()
