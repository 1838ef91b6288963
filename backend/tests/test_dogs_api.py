"""
HTTP tests for /api/v1/dogs, /files and /health.
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from dogpatch import database

DOG_BODY = {
    "about": "Lulu takes after her mother, most of the time.",
    "breed": "Poodle",
    "cost": 225.99,
    "gender": "female",
    "image_url": "http://testserver/files/lulu.png",
    "name": "Lulu",
    "relative_birthday": 15_768_000,
    "relative_creation": 14_400,
}


class TestDogIndex:

    @pytest.mark.asyncio
    async def test_empty(self, test_client):
        response = await test_client.get("/api/v1/dogs")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_oldest_first(self, test_client, create_user, create_dog):
        seller = await create_user()
        now = datetime.now(timezone.utc)
        await create_dog(seller, name="Newest", created=now)
        await create_dog(seller, name="Oldest", created=now - timedelta(days=3))

        response = await test_client.get("/api/v1/dogs")

        assert [d["name"] for d in response.json()] == ["Oldest", "Newest"]


class TestCreateDogEndpoint:

    @pytest.mark.asyncio
    async def test_create(self, test_client, create_user, auth_headers):
        seller = await create_user(review_count=7, review_rating_average=5.0)
        headers = await auth_headers(seller)

        response = await test_client.post("/api/v1/dogs", json=DOG_BODY, headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["seller_id"] == str(seller.id)
        assert body["breeder_rating"] == 5.0
        assert body["cost"] == 225.99
        assert body["gender"] == "female"

        listed = (await test_client.get("/api/v1/dogs")).json()
        assert [d["id"] for d in listed] == [body["id"]]

    @pytest.mark.asyncio
    async def test_breeder_rating_not_accepted_from_client(self, test_client, create_user, auth_headers):
        seller = await create_user()
        headers = await auth_headers(seller)

        response = await test_client.post(
            "/api/v1/dogs", json={**DOG_BODY, "breeder_rating": 1.0}, headers=headers
        )

        assert response.json()["breeder_rating"] == 4.5

    @pytest.mark.asyncio
    async def test_requires_auth(self, test_client):
        response = await test_client.post("/api/v1/dogs", json=DOG_BODY)

        assert response.status_code == 401

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "override",
        [{"gender": "unknown"}, {"name": ""}, {"cost": -5}, {"relative_birthday": -1}],
    )
    async def test_invalid_body(self, test_client, create_user, auth_headers, override):
        headers = await auth_headers(await create_user())

        response = await test_client.post("/api/v1/dogs", json={**DOG_BODY, **override}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_review_cascades_to_listing(self, test_client, create_user, auth_headers):
        seller = await create_user()
        seller_headers = await auth_headers(seller)
        buyer_headers = await auth_headers(await create_user())
        dog = (await test_client.post("/api/v1/dogs", json=DOG_BODY, headers=seller_headers)).json()
        assert dog["breeder_rating"] == 4.5

        await test_client.post(
            f"/api/v1/users/{seller.id}/reviews",
            json={"title": "Meh", "details": "Late pickup", "rating": 2.0},
            headers=buyer_headers,
        )

        listed = (await test_client.get("/api/v1/dogs")).json()
        assert listed[0]["breeder_rating"] == 2.0


class TestDogImagesEndpoint:

    @pytest.mark.asyncio
    async def test_upload(self, test_client, create_user, auth_headers, sample_png_bytes):
        seller = await create_user()
        headers = await auth_headers(seller)

        response = await test_client.post(
            "/api/v1/dogs/images",
            files={"file": ("lulu.png", sample_png_bytes, "image/png")},
            headers=headers,
        )

        assert response.status_code == 201
        locator = response.json()["image_url"]
        assert locator.startswith(f"http://testserver/files/users/{seller.id}/images/")
        assert (await test_client.get(locator)).content == sample_png_bytes

    @pytest.mark.asyncio
    async def test_requires_auth(self, test_client, sample_png_bytes):
        response = await test_client.post(
            "/api/v1/dogs/images",
            files={"file": ("lulu.png", sample_png_bytes, "image/png")},
        )

        assert response.status_code == 401


class TestDogSellerEndpoint:

    @pytest.mark.asyncio
    async def test_seller(self, test_client, create_user, create_dog):
        seller = await create_user(name="Manda")
        dog = await create_dog(seller)

        response = await test_client.get(f"/api/v1/dogs/{dog.id}/seller")

        assert response.status_code == 200
        assert response.json()["name"] == "Manda"
        assert "password" not in response.json()

    @pytest.mark.asyncio
    async def test_unknown_dog(self, test_client):
        response = await test_client.get(f"/api/v1/dogs/{uuid.uuid4()}/seller")

        assert response.status_code == 404


class TestFilesEndpoint:

    @pytest.mark.asyncio
    async def test_missing_file(self, test_client):
        response = await test_client.get(f"/files/users/{uuid.uuid4()}/images/nothing.png")

        assert response.status_code == 404


class TestHealthEndpoint:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client, db_engine, monkeypatch):
        monkeypatch.setattr(database, "engine", db_engine)

        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client, db_engine, monkeypatch):
        monkeypatch.setattr(database, "engine", db_engine)

        response = await test_client.get("/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/v1/dogs")

        assert len(response.headers["X-Request-ID"]) == 8
