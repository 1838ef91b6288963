"""
DogPatch Backend - Application Package
======================================

What: Marketplace backend for dogs-for-sale listings, their sellers, and
      seller reviews.
Who:  Imported by uvicorn (``dogpatch.main:app``), the seed routine, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Review aggregation, users, dogs
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes decode the request, resolve the authenticated user, and hand off to
    a service. Services own the transactional rules; the review aggregator is
    the only place where one request mutates several tables at once.
"""

__version__ = "1.0.0"
