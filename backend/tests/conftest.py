"""
DogPatch Backend - Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file (aiosqlite) with all tables
       created, a session factory bound to it, and factories for users,
       dogs and bearer tokens. `test_client` runs the real app over
       httpx's ASGITransport with get_db_session pointed at that database.

Fixture Hierarchy (all function-scoped):
    db_engine
    └── session_factory
        ├── db_session
        ├── create_user / create_dog / auth_headers
        └── test_client
"""

import base64
import os
import tempfile

# Settings are read at import time: configure before importing dogpatch
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="dogpatch_db_"), "app.db"
)
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="dogpatch_storage_")
os.environ["PUBLIC_BASE_URL"] = "http://testserver"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["RATE_LIMIT_REQUESTS"] = "10000"
os.environ["SEED_DATABASE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dogpatch.database import Base, build_engine, build_session_factory, get_db_session
from dogpatch.models import Dog, Gender, Token, User
from dogpatch.models.rating import DEFAULT_REVIEW_VALUE
from dogpatch.security import generate_token, hash_password

PASSWORD = "correct-horse-battery"


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'dogpatch.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return build_session_factory(db_engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Factories
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def create_user(session_factory):
    """
    Usage:
        seller = await create_user(email="vicki@example.com", review_count=1,
                                   review_rating_average=5.0)
    """
    counter = {"n": 0}

    async def _create(**fields) -> User:
        counter["n"] += 1
        values = {
            "email": f"user{counter['n']}@example.com",
            "name": f"User {counter['n']}",
            "password": hash_password(fields.pop("plain_password", PASSWORD)),
            "review_count": 0,
            "review_rating_average": DEFAULT_REVIEW_VALUE,
        }
        values.update(fields)
        async with session_factory() as session:
            user = User(**values)
            session.add(user)
            await session.commit()
            return user

    return _create


@pytest.fixture
def create_dog(session_factory):
    async def _create(seller: User, **fields) -> Dog:
        now = datetime.now(timezone.utc)
        values = {
            "seller_id": seller.id,
            "about": "Loves long walks",
            "birthday": now - timedelta(days=120),
            "breed": "Poodle",
            "breeder_rating": seller.review_rating_average,
            "cost": Decimal("225.99"),
            "created": now,
            "gender": Gender.FEMALE,
            "image_url": "http://testserver/files/lulu.png",
            "name": "Lulu",
        }
        values.update(fields)
        async with session_factory() as session:
            dog = Dog(**values)
            session.add(dog)
            await session.commit()
            return dog

    return _create


@pytest.fixture
def auth_headers(session_factory):
    """Issues a bearer token for `user` straight into the tokens table."""

    async def _issue(user: User) -> dict:
        token = Token(token=generate_token(), user_id=user.id)
        async with session_factory() as session:
            session.add(token)
            await session.commit()
        return {"Authorization": f"Bearer {token.token}"}

    return _issue


@pytest.fixture
def sample_png_bytes() -> bytes:
    """A complete 1x1 PNG, so libmagic reports image/png."""
    return base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
    )


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """
    HTTPX AsyncClient against the real app; lifespan does not run, so the
    module-level engine is never touched by route tests.
    """
    from dogpatch.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
    app.dependency_overrides.clear()
