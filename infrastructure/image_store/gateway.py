from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from config import settings
from services.errors import ValidationError


def file_too_large(max_bytes: int = settings.MAX_IMAGE_SIZE_BYTES) -> ValidationError:
    megabytes = max_bytes // (1024 * 1024)
    return ValidationError(f"File too large. Maximum size is {megabytes}MB")


@dataclass(slots=True)
class ImageUpload:
    """Raw image bytes received from a client, not yet stored."""

    content: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None

    def validate(self, max_bytes: int = settings.MAX_IMAGE_SIZE_BYTES) -> None:
        if not self.content:
            raise ValidationError("Product image is required")
        if self.content_type and not self.content_type.startswith("image/"):
            raise ValidationError("Only image files are allowed")
        if len(self.content) > max_bytes:
            raise file_too_large(max_bytes)


@dataclass(slots=True)
class StoredImage:
    """Location of an uploaded image and the handle needed to delete it."""

    url: str
    public_id: str


class ImageStoreGateway(Protocol):
    """Abstraction over the external object store holding product images."""

    async def upload(self, image: ImageUpload) -> StoredImage:
        """Store the image and return its durable URL and deletion handle."""

    async def delete(self, public_id: str) -> None:
        """Remove a previously stored image."""
