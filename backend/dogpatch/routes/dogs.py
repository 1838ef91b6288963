"""
DogPatch Backend - Dog Route Handlers
======================================

What:  The public listing index, listing creation and listing images.
Who:   Called by the DogPatch mobile clients.

Typical client flow for a new listing:
    1. POST /api/v1/dogs/images   -> {"image_url": "..."}
    2. POST /api/v1/dogs          with that image_url in the body
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from dogpatch.auth import get_current_user
from dogpatch.database import get_db_session
from dogpatch.models.user import User
from dogpatch.schemas.common import ErrorResponse
from dogpatch.schemas.dog import DogCreate, DogPublic, ImageUploadResponse
from dogpatch.schemas.user import UserPublic
from dogpatch.services.dog_service import dog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/dogs", tags=["Dogs"])


@router.get(
    "",
    response_model=List[DogPublic],
    summary="List every dog for sale, oldest listing first",
)
async def list_dogs(db: AsyncSession = Depends(get_db_session)):
    return await dog_service.list_dogs(db)


@router.post(
    "",
    response_model=DogPublic,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid listing", "model": ErrorResponse},
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    },
    summary="List a dog for sale",
    description=(
        "Creates a listing owned by the authenticated user. breeder_rating is "
        "copied from the seller's current average rating."
    ),
)
async def create_dog(
    payload: DogCreate,
    seller: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    return await dog_service.create_dog(db, seller, payload)


@router.post(
    "/images",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Unsupported or oversized image", "model": ErrorResponse},
        401: {"description": "Missing or invalid bearer token", "model": ErrorResponse},
    },
    summary="Upload a listing image",
)
async def upload_dog_image(
    file: UploadFile = File(..., description="PNG, JPEG or GIF image"),
    seller: User = Depends(get_current_user),
) -> ImageUploadResponse:
    content = await file.read()
    locator = await dog_service.upload_dog_image(seller, file.filename or "", content)
    return ImageUploadResponse(image_url=locator)


@router.get(
    "/{dog_id}/seller",
    response_model=UserPublic,
    responses={404: {"description": "Dog not found", "model": ErrorResponse}},
    summary="Get the seller of a dog",
)
async def get_dog_seller(
    dog_id: UUID,
    db: AsyncSession = Depends(get_db_session),
):
    return await dog_service.get_dog_seller(db, dog_id)
