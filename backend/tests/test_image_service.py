"""
DogPatch Backend - Image Service Unit Tests
============================================

What:  Tests for ImageService validation, storage layout and path resolution.
How:   Each test writes into pytest's tmp_path; nothing touches STORAGE_ROOT.
"""

import sys
import uuid
from unittest.mock import patch

import pytest

from dogpatch.exceptions import FileStorageError, ValidationError
from dogpatch.services.image_service import DOG_IMAGES, PROFILE_IMAGES, ImageService


class TestImageValidation:

    def setup_method(self):
        self.service = ImageService(storage_root="/tmp/unused", public_base_url="http://testserver")

    # ── Extension Validation ──────────────────────────────────────────────

    @pytest.mark.parametrize("filename", ["lulu.png", "lulu.jpg", "lulu.jpeg", "lulu.gif"])
    def test_allowed_extensions(self, filename):
        assert self.service.validate_extension(filename) == "." + filename.rsplit(".", 1)[1]

    def test_extension_case_insensitive(self):
        assert self.service.validate_extension("LULU.PNG") == ".png"
        assert self.service.validate_extension("lulu.Jpeg") == ".jpeg"

    @pytest.mark.parametrize("filename", ["notes.pdf", "payload.exe", "image.svg"])
    def test_rejected_extensions(self, filename):
        with pytest.raises(ValidationError, match="not supported"):
            self.service.validate_extension(filename)

    def test_missing_extension(self):
        with pytest.raises(ValidationError, match="missing a file extension"):
            self.service.validate_extension("noextension")

    # ── Size Validation ───────────────────────────────────────────────────

    def test_size_within_limit(self):
        self.service.validate_size(b"x" * 1000)

    def test_empty_rejected(self):
        with pytest.raises(ValidationError, match="empty"):
            self.service.validate_size(b"")

    def test_oversized_rejected(self):
        with patch("dogpatch.services.image_service.settings") as mock_settings:
            mock_settings.max_image_size = 100
            with pytest.raises(ValidationError, match="too large"):
                self.service.validate_size(b"x" * 101)


class TestImageStorage:

    @pytest.mark.asyncio
    async def test_store_layout_and_locator(self, tmp_path, sample_png_bytes):
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://cdn.example/")
        owner_id = uuid.uuid4()

        locator = await service.store(owner_id, PROFILE_IMAGES, sample_png_bytes, ".PNG")

        prefix = f"http://cdn.example/files/users/{owner_id}/profile-images/"
        assert locator.startswith(prefix)
        stored_name = locator[len(prefix):]
        assert stored_name.endswith(".png")
        uuid.UUID(stored_name[: -len(".png")])

        written = tmp_path / "users" / str(owner_id) / "profile-images" / stored_name
        assert written.read_bytes() == sample_png_bytes

    @pytest.mark.asyncio
    async def test_store_upload_ignores_client_filename(self, tmp_path, sample_png_bytes):
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://testserver")

        locator = await service.store_upload(
            uuid.uuid4(), DOG_IMAGES, "../../etc/passwd.png", sample_png_bytes
        )

        assert "passwd" not in locator
        assert "/images/" in locator

    @pytest.mark.asyncio
    async def test_store_upload_rejects_bad_extension_before_writing(self, tmp_path):
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://testserver")

        with pytest.raises(ValidationError):
            await service.store_upload(uuid.uuid4(), DOG_IMAGES, "script.sh", b"#!/bin/sh")

        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_unknown_category(self, tmp_path, sample_png_bytes):
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://testserver")

        with pytest.raises(ValueError):
            await service.store(uuid.uuid4(), "secrets", sample_png_bytes, ".png")

    @pytest.mark.asyncio
    async def test_write_failure_raises_storage_error(self, tmp_path, sample_png_bytes):
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://testserver")

        with patch("dogpatch.services.image_service.aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(FileStorageError):
                await service.store(uuid.uuid4(), DOG_IMAGES, sample_png_bytes, ".png")


class TestImageContentType:

    def setup_method(self):
        self.service = ImageService(storage_root="/tmp/unused", public_base_url="http://testserver")

    def test_real_png_accepted(self, sample_png_bytes):
        pytest.importorskip("magic")

        assert self.service.validate_mime_type(sample_png_bytes, ".png") == "image/png"

    def test_renamed_script_rejected(self):
        pytest.importorskip("magic")

        with pytest.raises(ValidationError, match="text/"):
            self.service.validate_mime_type(b"#!/bin/sh\necho not a picture\n", ".png")

    def test_png_named_as_jpeg_rejected(self, sample_png_bytes):
        pytest.importorskip("magic")

        with pytest.raises(ValidationError) as exc_info:
            self.service.validate_mime_type(sample_png_bytes, ".jpg")

        assert exc_info.value.context["detected_mime"] == "image/png"

    @pytest.mark.asyncio
    async def test_store_upload_rejects_renamed_file_before_writing(self, tmp_path):
        pytest.importorskip("magic")
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://testserver")

        with pytest.raises(ValidationError):
            await service.store_upload(uuid.uuid4(), DOG_IMAGES, "lulu.png", b"<html>not an image</html>")

        assert list(tmp_path.iterdir()) == []

    def test_falls_back_to_extension_without_libmagic(self, monkeypatch):
        # A None entry makes `import magic` raise ImportError
        monkeypatch.setitem(sys.modules, "magic", None)

        assert self.service.validate_mime_type(b"anything", ".jpeg") == "image/jpeg"


class TestResolve:

    def test_resolve_inside_root(self, tmp_path):
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://testserver")

        resolved = service.resolve("users/abc/images/x.png")

        assert resolved == tmp_path.resolve() / "users" / "abc" / "images" / "x.png"

    def test_resolve_rejects_traversal(self, tmp_path):
        service = ImageService(storage_root=str(tmp_path), public_base_url="http://testserver")

        with pytest.raises(ValidationError, match="Invalid file path"):
            service.resolve("../../etc/passwd")
