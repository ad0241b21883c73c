"""
Profile image uploads.

Stores images on local disk under generated names and returns the URL
they are served from. The stored URL is what clients pass back as
``profileImageRef``; nothing in the auth core reads the file itself.
"""

import asyncio
import logging
import uuid
from pathlib import Path

from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png"}


class LocalImageUploader:
    """IImageUploader writing to a local directory served at ``/uploads``."""

    def __init__(self, directory: Path, public_url: str, max_bytes: int):
        self._directory = Path(directory)
        self._public_url = public_url.rstrip("/")
        self._max_bytes = max_bytes

    async def upload(self, filename: str, data: bytes) -> str:
        """
        Save an image and return its public URL.

        Raises:
            InvalidInputError: Unsupported extension, empty or oversized file
        """
        suffix = Path(filename).suffix.lower()
        if suffix not in ALLOWED_EXTENSIONS:
            raise InvalidInputError(
                "Only .jpeg, .jpg and .png formats are allowed", field="image"
            )
        if not data:
            raise InvalidInputError("No file uploaded", field="image")
        if len(data) > self._max_bytes:
            raise InvalidInputError("Image is too large", field="image")

        # Generated name; the client's filename never reaches the filesystem
        name = f"{uuid.uuid4().hex}{suffix}"
        await asyncio.to_thread(self._write, name, data)
        logger.info("Stored uploaded image %s (%d bytes)", name, len(data))
        return f"{self._public_url}/uploads/{name}"

    def _write(self, name: str, data: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        (self._directory / name).write_bytes(data)
