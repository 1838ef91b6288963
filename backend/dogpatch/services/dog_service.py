"""
DogPatch Backend - Listing Service
===================================

What:  Creates dog listings and serves the public index.
How:   A listing's breeder_rating is copied from its seller's committed
       average at creation time, under the seller lock the review
       aggregator uses. From then on only the aggregator changes it.
Who:   Called by the dogs router and the seed routine.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from dogpatch.exceptions import NotFoundError, PersistenceError
from dogpatch.models.dog import Dog
from dogpatch.models.user import User
from dogpatch.schemas.dog import DogCreate
from dogpatch.services.image_service import DOG_IMAGES, image_service
from dogpatch.services.review_service import review_aggregator

logger = logging.getLogger(__name__)


def build_dog(seller: User, payload: DogCreate, now: Optional[datetime] = None) -> Dog:
    """
    Turn a DogCreate into an unsaved Dog owned by `seller`.

    relative_birthday and relative_creation are seconds before `now`.
    """
    now = now or datetime.now(timezone.utc)
    return Dog(
        seller_id=seller.id,
        about=payload.about,
        birthday=now - timedelta(seconds=payload.relative_birthday),
        breed=payload.breed,
        breeder_rating=seller.review_rating_average,
        cost=payload.cost,
        created=now - timedelta(seconds=payload.relative_creation),
        gender=payload.gender,
        image_url=payload.image_url,
        name=payload.name,
    )


class DogService:

    async def create_dog(self, db: AsyncSession, seller: User, payload: DogCreate) -> Dog:
        """
        List a new dog for `seller`.

        Runs under the same seller lock as ReviewAggregator.record_review and
        re-reads the seller row FOR UPDATE, so the snapshot is the committed
        average and no review can land between the read and the insert.
        Commits before the lock is released.

        Raises:
            NotFoundError: the seller no longer exists
            PersistenceError: insert failed; the transaction was rolled back
        """
        async with review_aggregator.locks.hold(seller.id):
            try:
                result = await db.execute(
                    select(User)
                    .where(User.id == seller.id)
                    .with_for_update()
                    .execution_options(populate_existing=True)
                )
                current = result.scalar_one_or_none()
                if current is None:
                    raise NotFoundError(resource="seller", resource_id=str(seller.id))

                dog = build_dog(current, payload)
                db.add(dog)
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error("Database error creating dog for %s: %s", seller.id, str(e), exc_info=True)
                raise PersistenceError(context={"seller_id": str(seller.id)})

        logger.info("Dog %s listed by %s (breeder_rating=%.4f)", dog.id, seller.id, dog.breeder_rating)
        return dog

    async def list_dogs(self, db: AsyncSession) -> List[Dog]:
        """All listings, oldest first (uses idx_dogs_created)."""
        try:
            result = await db.execute(select(Dog).order_by(Dog.created.asc()))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing dogs: %s", str(e), exc_info=True)
            raise PersistenceError(context={"error_type": type(e).__name__})

    async def get_dog_seller(self, db: AsyncSession, dog_id: UUID) -> User:
        """
        Raises:
            NotFoundError: no dog with `dog_id`
        """
        try:
            result = await db.execute(
                select(User).join(Dog, Dog.seller_id == User.id).where(Dog.id == dog_id)
            )
            seller = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error fetching seller of dog %s: %s", dog_id, str(e))
            raise PersistenceError(context={"dog_id": str(dog_id)})

        if seller is None:
            raise NotFoundError(resource="dog", resource_id=str(dog_id))
        return seller

    async def upload_dog_image(self, seller: User, filename: str, content: bytes) -> str:
        """Store a listing image under `seller`; the locator goes into DogCreate.image_url."""
        return await image_service.store_upload(seller.id, DOG_IMAGES, filename, content)


# ── Singleton Instance ────────────────────────────────────────────────────
dog_service = DogService()
