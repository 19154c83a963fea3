"""
Upload Storage - payment screenshots on local disk.

Files are written under settings.UPLOAD_DIR as `<epoch-millis>-<original stem>.<ext>`
and served back by the app under UPLOAD_URL_PREFIX. The extension always comes
from the decoded image, so the static mount never serves an upload as markup.
"""

import re
import time
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from PIL import Image

from velonix.core.config import settings
from velonix.core.exceptions import FileTooLargeError, InvalidFileTypeError, StorageError
from velonix.core.logging_config import logger

UPLOAD_URL_PREFIX = "/uploads"
ALLOWED_CONTENT_TYPE_PREFIX = "image/"

# Pillow format name -> stored extension
IMAGE_EXTENSIONS = {
    "PNG": "png",
    "JPEG": "jpg",
    "GIF": "gif",
    "WEBP": "webp",
}
ALLOWED_IMAGE_TYPES = ["image/png", "image/jpeg", "image/gif", "image/webp"]

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass
class UploadedFile:
    """An uploaded file as received from the client"""
    filename: str
    content: bytes
    content_type: Optional[str] = None


def sanitize_filename(filename: str) -> str:
    """Strip directories and characters that are unsafe on disk or in URLs"""
    name = Path(filename.replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name[:120] or "upload"


def detect_image_extension(content: bytes) -> Optional[str]:
    """Extension for a decodable PNG/JPEG/GIF/WebP image, None for anything else"""
    try:
        with Image.open(BytesIO(content)) as image:
            image_format = image.format
            image.verify()
    except Exception as e:
        logger.debug(f"[Uploads] Not a readable image: {type(e).__name__}: {e}")
        return None
    return IMAGE_EXTENSIONS.get(image_format)


class UploadStorage:
    """Writes uploads to a directory and returns their public path"""

    def __init__(self, upload_dir: Optional[Path] = None, max_size: Optional[int] = None):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR)
        self.max_size = max_size if max_size is not None else settings.MAX_UPLOAD_SIZE

    def validate(self, upload: UploadedFile) -> str:
        """
        Reject non-images and oversized files before anything is written.

        Both the declared content type and the bytes themselves must be an
        image; returns the extension of the decoded format.
        """
        content_type = (upload.content_type or "").lower()
        if not content_type.startswith(ALLOWED_CONTENT_TYPE_PREFIX):
            raise InvalidFileTypeError(content_type or "unknown", ALLOWED_IMAGE_TYPES)
        if len(upload.content) > self.max_size:
            raise FileTooLargeError(len(upload.content), self.max_size)

        extension = detect_image_extension(upload.content)
        if extension is None:
            logger.warning(f"[Uploads] Rejected {upload.filename!r}: declared {content_type} but not a supported image")
            raise InvalidFileTypeError(content_type, ALLOWED_IMAGE_TYPES)
        return extension

    def build_name(self, filename: str, extension: str) -> str:
        stem = Path(sanitize_filename(filename)).stem.strip("._") or "upload"
        return f"{int(time.time() * 1000)}-{stem}.{extension}"

    async def save(self, upload: UploadedFile) -> str:
        """
        Validate and persist the upload.

        Returns:
            Public path such as /uploads/1735640000000-receipt.png

        Raises:
            InvalidFileTypeError / FileTooLargeError if the upload is refused
            StorageError if the file could not be written
        """
        name = self.build_name(upload.filename, self.validate(upload))
        target = self.upload_dir / name

        try:
            await aiofiles.os.makedirs(self.upload_dir, exist_ok=True)
            async with aiofiles.open(target, "wb") as f:
                await f.write(upload.content)
        except OSError as e:
            logger.error(f"[Uploads] Failed to write {target}: {e}")
            raise StorageError(f"Could not store upload: {e}")

        logger.info(f"[Uploads] Stored {upload.filename} as {name} ({len(upload.content)} bytes)")
        return f"{UPLOAD_URL_PREFIX}/{name}"
