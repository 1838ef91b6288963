"""
DogPatch Backend - Stored Image Route
======================================

What:  Serves images written by the image service.
How:   The path after /files/ is the locator path the image service handed
       out, resolved under STORAGE_ROOT.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import FileResponse

from dogpatch.exceptions import NotFoundError
from dogpatch.schemas.common import ErrorResponse
from dogpatch.services.image_service import image_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Files"])


@router.get(
    "/files/{file_path:path}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "Image file"},
        400: {"description": "Path escapes the storage root", "model": ErrorResponse},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_file(file_path: str) -> FileResponse:
    full_path = image_service.resolve(file_path)
    if not full_path.is_file():
        raise NotFoundError(resource="file", resource_id=file_path)

    # Stored names are random UUIDs, so content never changes under a path
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
