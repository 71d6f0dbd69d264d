"""Article image uploads."""

import logging
import time
from pathlib import Path

from pydantic import BaseModel

from community.exceptions import PermissionDeniedError, ValidationError
from community.models.session import Session
from community.models.user import can_manage_articles
from community.providers.storage_client import StorageClient

logger = logging.getLogger(__name__)

# Maximum image size: 5MB
MAX_IMAGE_SIZE = 5 * 1024 * 1024


class UploadedImage(BaseModel):
    """Stored image location."""

    path: str
    url: str
    markdown: str


def validate_image(content_type: str | None, size: int) -> None:
    """
    Check an upload's declared MIME type and size.

    Raises:
        ValidationError: Keyed on ``file``.
    """
    if not content_type or not content_type.startswith("image/"):
        raise ValidationError({"file": "Please upload an image file"})
    if size == 0:
        raise ValidationError({"file": "File is empty"})
    if size > MAX_IMAGE_SIZE:
        raise ValidationError({"file": "Image file should be less than 5MB"})


def sanitize_filename(filename: str) -> str:
    """
    Sanitize filename to prevent path traversal in object paths.

    Args:
        filename: Original filename

    Returns:
        Sanitized filename
    """
    # Remove path components (keep only basename)
    filename = Path(filename.replace("\\", "/")).name

    for char in ["<", ">", ":", '"', "|", "?", "*", "#", "\x00", " "]:
        filename = filename.replace(char, "_")

    if len(filename) > 200:
        # Keep extension
        if "." in filename:
            name, ext = filename.rsplit(".", 1)
            filename = f"{name[: 200 - len(ext) - 1]}.{ext}"
        else:
            filename = filename[:200]

    return filename or "image"


class ImageService:
    """Stores images embedded in article content."""

    def __init__(self, storage: StorageClient, prefix: str = "article-images"):
        """
        Initialize image service.

        Args:
            storage: GCS storage client.
            prefix: Object path prefix for article images.
        """
        self.storage = storage
        self.prefix = prefix

    async def upload_image(
        self,
        session: Session,
        filename: str,
        content_type: str | None,
        data: bytes,
    ) -> UploadedImage:
        """
        Upload an image and return its public URL.

        Raises:
            PermissionDeniedError: If the user cannot manage articles
            ValidationError: If the file is not an image or is too large
        """
        if not can_manage_articles(session.user):
            raise PermissionDeniedError("You don't have permission to upload images")

        validate_image(content_type, len(data))

        name = sanitize_filename(filename)
        path = f"{self.prefix}/{int(time.time() * 1000)}-{name}"
        await self.storage.upload_bytes(data, path, content_type=content_type)
        url = self.storage.get_public_url(path)

        logger.info(f"User {session.user.id} uploaded image {path} ({len(data)} bytes)")
        return UploadedImage(path=path, url=url, markdown=f"![{name}]({url})")
