"""
DogPatch Backend - User Route Handlers
=======================================

What:  Registration, login, lookup, profile updates and seller reviews.
How:   Thin handlers: pull data out of the request, call the user service or
       the review aggregator, let response_model shape the JSON.

Route order matters: /login and /search are declared before /{user_id}.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from fastapi.security import HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from dogpatch.auth import get_basic_credentials, get_current_user
from dogpatch.database import get_db_session
from dogpatch.models.user import User
from dogpatch.schemas.common import ErrorResponse
from dogpatch.schemas.review import ReviewCreate, ReviewPublic
from dogpatch.schemas.user import TokenPublic, UserCreate, UserPublic, UserUpdate
from dogpatch.services.review_service import review_aggregator
from dogpatch.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["Users"])

AUTH_ERRORS = {
    400: {"description": "Invalid input", "model": ErrorResponse},
    401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
}


@router.post(
    "",
    response_model=UserPublic,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "email, name or password missing", "model": ErrorResponse},
        409: {"description": "Email already registered", "model": ErrorResponse},
    },
    summary="Register a user",
)
async def register_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await user_service.register_user(db, payload)


@router.post(
    "/login",
    response_model=TokenPublic,
    responses={401: {"description": "Bad credentials", "model": ErrorResponse}},
    summary="Exchange Basic credentials for a bearer token",
)
async def login(
    credentials: HTTPBasicCredentials = Depends(get_basic_credentials),
    db: AsyncSession = Depends(get_db_session),
):
    return await user_service.login(db, credentials.username, credentials.password)


@router.get(
    "/search",
    response_model=UserPublic,
    responses={
        400: {"description": "Missing email parameter", "model": ErrorResponse},
        404: {"description": "No user with that email", "model": ErrorResponse},
    },
    summary="Find a user by email (case-insensitive)",
)
async def search_users(
    email: str | None = Query(default=None, description="Email to look up"),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await user_service.search_by_email(db, email)


@router.put(
    "",
    response_model=UserPublic,
    responses={**AUTH_ERRORS, 409: {"description": "Email taken", "model": ErrorResponse}},
    summary="Update the authenticated user",
    description=(
        "Partial update: only the fields present in the body are applied. "
        "Passwords are re-hashed; emails are normalized and must be unique."
    ),
)
async def update_user(
    update: UserUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await user_service.update_user(db, user, update)


@router.post(
    "/profile-image",
    response_model=UserPublic,
    responses=AUTH_ERRORS,
    summary="Upload a profile image for the authenticated user",
)
async def upload_profile_image(
    file: UploadFile = File(..., description="PNG, JPEG or GIF image"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    content = await file.read()
    return await user_service.upload_profile_image(db, user, file.filename or "", content)


@router.get(
    "/{user_id}",
    response_model=UserPublic,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user by ID",
)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await user_service.get_user(db, user_id)


# ── Seller Reviews ────────────────────────────────────────────────────────

@router.post(
    "/{seller_id}/reviews",
    response_model=ReviewPublic,
    status_code=status.HTTP_201_CREATED,
    responses={**AUTH_ERRORS, 404: {"description": "Seller not found", "model": ErrorResponse}},
    summary="Review a seller",
    description=(
        "Records a review and moves the seller's average rating. Every dog the "
        "seller lists picks up the new average as its breeder_rating."
    ),
)
async def create_review(
    seller_id: UUID,
    payload: ReviewCreate,
    reviewer: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return await review_aggregator.record_review(
        db,
        seller_id=seller_id,
        reviewer_id=reviewer.id,
        rating=payload.rating,
        title=payload.title,
        details=payload.details,
    )


@router.get(
    "/{seller_id}/reviews",
    response_model=List[ReviewPublic],
    responses={404: {"description": "Seller not found", "model": ErrorResponse}},
    summary="List reviews received by a seller",
)
async def list_reviews(
    seller_id: UUID,
    db: AsyncSession = Depends(get_db_session),
):
    return await review_aggregator.list_seller_reviews(db, seller_id)
