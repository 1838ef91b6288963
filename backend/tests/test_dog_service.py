"""
Tests for DogService: listing creation, the index and seller lookup.
"""

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from dogpatch.exceptions import NotFoundError, ValidationError
from dogpatch.models import Gender, User
from dogpatch.schemas.dog import DogCreate
from dogpatch.services.dog_service import build_dog, dog_service


def make_payload(**overrides) -> DogCreate:
    fields = {
        "about": "Pure-bred Poodle",
        "breed": "Poodle",
        "cost": Decimal("225.99"),
        "gender": Gender.FEMALE,
        "image_url": "http://testserver/files/lulu.png",
        "name": "Lulu",
        "relative_birthday": 180 * 24 * 3600.0,
        "relative_creation": 4 * 3600.0,
    }
    fields.update(overrides)
    return DogCreate(**fields)


class TestBuildDog:

    def test_relative_times(self):
        seller = User(id=uuid.uuid4(), review_rating_average=4.5)
        now = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

        dog = build_dog(seller, make_payload(relative_birthday=86400.0, relative_creation=3600.0), now)

        assert dog.birthday == now - timedelta(days=1)
        assert dog.created == now - timedelta(hours=1)

    def test_snapshots_seller_average(self):
        seller = User(id=uuid.uuid4(), review_rating_average=3.25)

        dog = build_dog(seller, make_payload())

        assert dog.breeder_rating == 3.25
        assert dog.seller_id == seller.id


class TestCreateDog:

    @pytest.mark.asyncio
    async def test_create_for_new_seller_uses_default(self, db_session, create_user):
        created = await create_user()
        seller = await db_session.get(User, created.id)

        dog = await dog_service.create_dog(db_session, seller, make_payload())
        await db_session.commit()

        assert dog.id is not None
        assert dog.breeder_rating == 4.5
        assert dog.cost == Decimal("225.99")
        assert dog.gender == Gender.FEMALE

    @pytest.mark.asyncio
    async def test_create_for_rated_seller(self, db_session, create_user):
        created = await create_user(review_count=7, review_rating_average=5.0)
        seller = await db_session.get(User, created.id)

        dog = await dog_service.create_dog(db_session, seller, make_payload())

        assert dog.breeder_rating == 5.0

    def test_payload_rejects_negative_offsets(self):
        with pytest.raises(ValueError):
            make_payload(relative_birthday=-1.0)

    def test_payload_rejects_fractional_cents(self):
        with pytest.raises(ValueError):
            make_payload(cost=Decimal("10.999"))


class TestListDogs:

    @pytest.mark.asyncio
    async def test_sorted_by_creation_oldest_first(self, db_session, create_user, create_dog):
        seller = await create_user()
        now = datetime.now(timezone.utc)
        await create_dog(seller, name="Jack", created=now - timedelta(days=3))
        await create_dog(seller, name="Lulu", created=now - timedelta(hours=4))
        await create_dog(seller, name="Snowball", created=now - timedelta(days=1))

        dogs = await dog_service.list_dogs(db_session)

        assert [d.name for d in dogs] == ["Jack", "Snowball", "Lulu"]

    @pytest.mark.asyncio
    async def test_empty(self, db_session):
        assert await dog_service.list_dogs(db_session) == []


class TestDogSeller:

    @pytest.mark.asyncio
    async def test_returns_seller(self, db_session, create_user, create_dog):
        seller = await create_user(name="Manda")
        dog = await create_dog(seller)

        found = await dog_service.get_dog_seller(db_session, dog.id)

        assert found.id == seller.id
        assert found.name == "Manda"

    @pytest.mark.asyncio
    async def test_unknown_dog(self, db_session):
        with pytest.raises(NotFoundError, match="dog"):
            await dog_service.get_dog_seller(db_session, uuid.uuid4())


class TestDogImage:

    @pytest.mark.asyncio
    async def test_upload_under_seller_images(self, create_user, sample_png_bytes):
        seller = await create_user()

        locator = await dog_service.upload_dog_image(seller, "lulu.png", sample_png_bytes)

        assert locator.startswith(f"http://testserver/files/users/{seller.id}/images/")
        assert locator.endswith(".png")

    @pytest.mark.asyncio
    async def test_upload_rejects_unsupported_type(self, create_user):
        seller = await create_user()

        with pytest.raises(ValidationError):
            await dog_service.upload_dog_image(seller, "lulu.bmp", b"BM")
