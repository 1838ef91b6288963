"""
DogPatch Backend - Image Storage Service
=========================================

What:  Stores uploaded images on local disk and hands back a public locator.
How:   Validates extension, size and content type (python-magic), writes
       with aiofiles under
       STORAGE_ROOT/users/<owner_id>/<category>/<uuid>.<ext>, and returns
       PUBLIC_BASE_URL/files/users/<owner_id>/<category>/<uuid>.<ext>.
Who:   Called by the user service (profile images) and the dogs router
       (listing images). Served back by routes/files.py.

Directory Structure:
    storage/
    └── users/
        └── 3e590d1b-73b5-45a6-9806-4d52a70dec22/
            ├── profile-images/
            │   └── a1b2c3d4-....png
            └── images/
                └── e5f6g7h8-....jpg

Attack vectors prevented:
    - Path traversal: stored names are UUIDs; owner ids are UUIDs; categories
      come from a fixed set
    - DoS via large files: size limit checked before anything is written
    - Renamed files: magic bytes must match the extension (x.png holding a
      script is rejected)
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from dogpatch.config import settings
from dogpatch.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

EXTENSION_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
}
ALLOWED_EXTENSIONS = set(EXTENSION_MIME_TYPES)

PROFILE_IMAGES = "profile-images"
DOG_IMAGES = "images"
CATEGORIES = {PROFILE_IMAGES, DOG_IMAGES}


class ImageService:
    """
    Local-disk blob store keyed by owner and category.

    The locator is the only thing callers keep: it is written into
    users.profile_image_url or dogs.image_url as-is.
    """

    def __init__(self, storage_root: Optional[str] = None, public_base_url: Optional[str] = None):
        """
        Args:
            storage_root: Override settings.storage_root (used in tests).
            public_base_url: Override settings.public_base_url (used in tests).
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")

    def validate_extension(self, filename: str) -> str:
        """
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if the extension is missing or not allowed.
        """
        ext = Path(filename).suffix.lower()
        if not ext:
            raise ValidationError(
                message="Image is missing a file extension",
                field="file",
            )
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content: bytes) -> None:
        if not content:
            raise ValidationError(message="Uploaded image is empty", field="file")

        if len(content) > settings.max_image_size:
            max_mb = settings.max_image_size / (1024 * 1024)
            raise ValidationError(
                message=f"Image is too large. Maximum size is {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": len(content)},
            )

    def validate_mime_type(self, content: bytes, extension: str) -> str:
        """
        Check the bytes really are the image type the extension claims.

        How:     python-magic matches the file header against known signatures
                 (PNG starts with 89 50 4E 47, JPEG with FF D8 FF).

        Returns: Detected MIME type.
        Raises:  ValidationError if the content does not match the extension.
        """
        try:
            import magic
        except ImportError:
            # python-magic present but libmagic missing (e.g. a slim CI image)
            logger.warning(
                "python-magic not available, falling back to extension-based type detection. "
                "Install libmagic for production security."
            )
            return EXTENSION_MIME_TYPES[extension]

        try:
            mime_type = magic.from_buffer(content, mime=True)
        except magic.MagicException as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise FileStorageError(
                message="Could not verify image type. Please try again.",
                context={"error": str(e)},
            )

        expected = EXTENSION_MIME_TYPES[extension]
        if mime_type != expected:
            raise ValidationError(
                message=f"Image content is '{mime_type}' but the file is named as '{extension}'",
                field="file",
                context={"detected_mime": mime_type, "expected_mime": expected},
            )
        return mime_type

    def relative_path(self, owner_id: uuid.UUID, category: str, extension: str) -> str:
        if category not in CATEGORIES:
            raise ValueError(f"Unknown image category '{category}'")
        return f"users/{owner_id}/{category}/{uuid.uuid4()}{extension}"

    def locator(self, relative_path: str) -> str:
        return f"{self.public_base_url}/files/{relative_path}"

    def resolve(self, relative_path: str) -> Path:
        """
        Maps a locator path back onto disk.

        Raises:
            ValidationError if the path escapes the storage root.
        """
        full_path = (self.storage_root / relative_path).resolve()
        if not full_path.is_relative_to(self.storage_root):
            raise ValidationError(message="Invalid file path")
        return full_path

    async def store(
        self,
        owner_id: uuid.UUID,
        category: str,
        content: bytes,
        extension: str,
    ) -> str:
        """
        Write image bytes for `owner_id` and return the public locator.

        Raises:
            ValidationError if the bytes are empty or too large.
            FileStorageError if directory creation or the write fails.
        """
        self.validate_size(content)
        relative_path = self.relative_path(owner_id, category, extension.lower())
        absolute_path = self.storage_root / relative_path

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store image at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("Image stored: %s (%d bytes)", relative_path, len(content))
        return self.locator(relative_path)

    async def store_upload(
        self,
        owner_id: uuid.UUID,
        category: str,
        filename: str,
        content: bytes,
    ) -> str:
        """
        Validates extension, size and the actual image type, then stores
        the bytes. Nothing is written when any check fails.
        """
        ext = self.validate_extension(filename)
        self.validate_size(content)
        self.validate_mime_type(content, ext)
        return await self.store(owner_id, category, content, ext)


image_service = ImageService()
