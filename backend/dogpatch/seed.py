"""
DogPatch Backend - Demo Data
=============================

What:  Two demo sellers and their four dogs.
When:  Application startup when SEED_DATABASE is set, and only while the
       users table is empty, so restarting never duplicates anything.

The sellers are inserted with review stats already in place and their dogs
carry the matching breeder_rating, so the listing invariant
(dog.breeder_rating == seller.review_rating_average) holds from the start.
"""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dogpatch.config import settings
from dogpatch.models.dog import Gender
from dogpatch.models.rating import DEFAULT_REVIEW_VALUE, MAX_REVIEW_VALUE
from dogpatch.models.user import User
from dogpatch.schemas.dog import DogCreate
from dogpatch.security import hash_password
from dogpatch.services.dog_service import build_dog

logger = logging.getLogger(__name__)

VICKI_ID = uuid.UUID("3e590d1b-73b5-45a6-9806-4d52a70dec22")
MANDA_ID = uuid.UUID("6c739af2-34fc-41aa-b456-d6c2812e58d7")

# Seconds
HOUR = 60.0 * 60
DAY = 24 * HOUR
MONTH = 30.42 * DAY
YEAR = 365 * DAY


def demo_sellers():
    return [
        User(
            id=MANDA_ID,
            about=(
                "Manda loves dogs big and small! Unfortunately, she has too many, "
                "and they have taken over her home..."
            ),
            email="manda@example.com",
            name="Manda",
            password=hash_password(settings.seed_manda_password),
            profile_image_url="https://live.staticflickr.com/65535/48259249582_58c1a06037.png",
            review_count=35,
            review_rating_average=DEFAULT_REVIEW_VALUE,
        ),
        User(
            id=VICKI_ID,
            about=(
                "Ever since her 2018 debut, Vicki has been breeding prize-winning poodles.\n\n"
                "Ray didn't think she could do it, but she really showed him!"
            ),
            email="vicki@example.com",
            name="Vicki",
            password=hash_password(settings.seed_vicki_password),
            profile_image_url="https://live.staticflickr.com/65535/48259248522_6645c2f9f3_m.png",
            review_count=7,
            review_rating_average=MAX_REVIEW_VALUE,
        ),
    ]


DEMO_DOGS = {
    VICKI_ID: [
        DogCreate(
            about=(
                "Lulu's parents are pure-bred Poodles, and her mother is the 2018 "
                "best-in-show Poodle-Doodle winner. Her father is a good-for-nothing, "
                "lazy dog. Fortunately, Lulu takes after her mother, most of the time."
            ),
            breed="Poodle",
            cost=Decimal("225.99"),
            gender=Gender.FEMALE,
            image_url="https://live.staticflickr.com/65535/48259180361_e385cbaa94_m.png",
            name="Lulu",
            relative_birthday=6 * MONTH,
            relative_creation=4 * HOUR,
        ),
    ],
    MANDA_ID: [
        DogCreate(
            about=(
                "Joey is a pure-bred Doberman Pinscher. By which I mean, he was fed "
                "bread, and his father is a Doberman! Be careful, his father is "
                "huge...! Joey is best for someone with a lot of outdoor space."
            ),
            breed="Doberman Mix",
            cost=Decimal("399.99"),
            gender=Gender.MALE,
            image_url="https://live.staticflickr.com/65535/48259249117_2b761a6f6f_m.png",
            name="Joey",
            relative_birthday=3 * MONTH,
            relative_creation=6 * HOUR,
        ),
        DogCreate(
            about=(
                "Snowball is a go-getter kind of dog. You'll be very happy with him "
                "if you like energetic dogs. He enjoys chasing sticks, balls, "
                "frisbees, really anything that you throw! If you get Snowball, and "
                "you manage to find my keys, please send those back."
            ),
            breed="Lab mix",
            cost=Decimal("199.99"),
            gender=Gender.MALE,
            image_url="https://live.staticflickr.com/65535/48259249007_0e59e44318_m.png",
            name="Snowball",
            relative_birthday=8 * MONTH,
            relative_creation=DAY,
        ),
        DogCreate(
            about=(
                "Jack is a chill, fun-loving kinda dog. He's the kinda dog that likes "
                "piña coladas and dancin' in the rain."
            ),
            breed="German Shepherd",
            cost=Decimal("399.99"),
            gender=Gender.MALE,
            image_url="https://live.staticflickr.com/65535/48259180871_271e9cae35_m.png",
            name="Jack",
            relative_birthday=YEAR,
            relative_creation=3 * DAY,
        ),
    ],
}


async def seed_database(db: AsyncSession) -> bool:
    """
    Insert the demo data if no user exists yet.

    Returns: True if anything was inserted.
    """
    existing = await db.scalar(select(func.count(User.id)))
    if existing:
        logger.info("Seed skipped: %d users already present", existing)
        return False

    now = datetime.now(timezone.utc)
    sellers = demo_sellers()
    db.add_all(sellers)
    for seller in sellers:
        db.add_all(build_dog(seller, payload, now=now) for payload in DEMO_DOGS[seller.id])

    await db.commit()
    logger.info(
        "Seeded %d sellers and %d dogs",
        len(sellers),
        sum(len(dogs) for dogs in DEMO_DOGS.values()),
    )
    return True
