"""
File upload utilities for image validation and local storage.
Uploaded images are written under the upload directory and served statically.
"""

import io
import uuid
import logging
from pathlib import Path
from typing import List, Optional, Tuple
from PIL import Image, UnidentifiedImageError
import aiofiles
from fastapi import UploadFile

from realty.config import settings
from realty.utils.exceptions import (
    FileUploadError,
    UnsupportedFileTypeError,
    FileSizeExceededError,
)

logger = logging.getLogger(__name__)


class FileValidator:
    """Utility class for file validation operations."""

    # Supported image formats: MIME type -> (extensions, Pillow format name)
    SUPPORTED_FORMATS = {
        "image/jpeg": ([".jpg", ".jpeg"], "jpeg"),
        "image/png": ([".png"], "png"),
        "image/webp": ([".webp"], "webp"),
    }

    MAX_WIDTH = 10000
    MAX_HEIGHT = 10000

    @classmethod
    def allowed_types(cls) -> List[str]:
        return [t for t in settings.allowed_file_types if t in cls.SUPPORTED_FORMATS]

    @classmethod
    def validate_mime_type(cls, mime_type: str) -> str:
        allowed = cls.allowed_types()
        if mime_type not in allowed:
            raise UnsupportedFileTypeError(mime_type or "unknown", allowed)
        return mime_type

    @classmethod
    def validate_file_size(cls, file_size: int, max_size: Optional[int] = None) -> int:
        if file_size <= 0:
            raise FileUploadError("File is empty")

        max_allowed = max_size or settings.max_file_size
        if file_size > max_allowed:
            raise FileSizeExceededError(file_size, max_allowed)
        return file_size

    @classmethod
    def validate_image_content(cls, content: bytes, mime_type: str) -> Tuple[int, int]:
        """
        Check that the bytes are a real image of the declared type.

        Returns:
            Tuple of (width, height)
        """
        try:
            with Image.open(io.BytesIO(content)) as img:
                width, height = img.size
                pil_format = (img.format or "").lower()
        except (UnidentifiedImageError, OSError) as e:
            raise FileUploadError(f"Invalid image file: {e}")

        expected_format = cls.SUPPORTED_FORMATS[mime_type][1]
        if pil_format != expected_format:
            raise FileUploadError(
                f"Image format '{pil_format}' doesn't match MIME type '{mime_type}'"
            )

        if width > cls.MAX_WIDTH or height > cls.MAX_HEIGHT:
            raise FileUploadError(
                f"Image dimensions {width}x{height} exceed {cls.MAX_WIDTH}x{cls.MAX_HEIGHT}"
            )

        return width, height

    @classmethod
    async def read_and_validate(cls, file: UploadFile) -> Tuple[bytes, str]:
        """
        Read an upload and validate type, size and content.

        Returns:
            Tuple of (content, file extension)
        """
        mime_type = cls.validate_mime_type(file.content_type or "")

        await file.seek(0)
        content = await file.read()
        cls.validate_file_size(len(content))
        cls.validate_image_content(content, mime_type)

        extension = Path(file.filename or "").suffix.lower()
        if extension not in cls.SUPPORTED_FORMATS[mime_type][0]:
            extension = cls.SUPPORTED_FORMATS[mime_type][0][0]

        return content, extension


class FileStorage:
    """Stores files under the upload directory and maps them to public URLs."""

    def __init__(self, base_dir: Optional[Path] = None, url_prefix: Optional[str] = None):
        self.base_dir = Path(base_dir or settings.upload_dir)
        self.url_prefix = (url_prefix or settings.upload_url_prefix).rstrip("/")

    def generate_unique_filename(self, extension: str) -> str:
        return f"{uuid.uuid4()}{extension}"

    async def save_bytes(self, folder: str, content: bytes, extension: str) -> str:
        """
        Write content to <upload_dir>/<folder>/<uuid><ext>.

        Returns:
            Public URL of the stored file
        """
        target_dir = self.base_dir / folder
        target_dir.mkdir(parents=True, exist_ok=True)
        file_path = target_dir / self.generate_unique_filename(extension)

        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            if file_path.exists():
                file_path.unlink()
            raise FileUploadError(f"Failed to save file: {e}")

        relative = file_path.relative_to(self.base_dir).as_posix()
        logger.debug(f"Stored upload {relative} ({len(content)} bytes)")
        return f"{self.url_prefix}/{relative}"

    def path_for_url(self, url: str, folder: Optional[str] = None) -> Optional[Path]:
        """
        Map a public URL back to a path inside the upload directory.

        When folder is given, only files stored under that folder resolve.
        """
        prefix = self.url_prefix + "/"
        if not url or not url.startswith(prefix):
            return None
        candidate = (self.base_dir / url[len(prefix):]).resolve()
        base = (self.base_dir / folder if folder else self.base_dir).resolve()
        if base not in candidate.parents:
            return None
        return candidate

    def delete_url(self, url: str, folder: Optional[str] = None) -> bool:
        """
        Delete the file behind a public URL.

        Returns:
            True if a file was removed
        """
        path = self.path_for_url(url, folder)
        if path is None or not path.exists():
            return False
        try:
            path.unlink()
            return True
        except OSError as e:
            logger.warning(f"Could not delete stored file {path}: {e}")
            return False

    def delete_urls(self, urls: List[str], folder: Optional[str] = None) -> int:
        return sum(1 for url in urls if self.delete_url(url, folder))


def listing_folder(property_id) -> str:
    """Upload folder that holds a listing's images."""
    return f"properties/{property_id}"
