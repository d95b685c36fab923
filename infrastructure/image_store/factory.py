from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from config.settings import IMAGE_STORE_MODE

from .cloudinary_store import CloudinaryImageStore
from .gateway import ImageStoreGateway


class ImageStoreBackend(str, Enum):
    CLOUDINARY = "cloudinary"


def create_image_store(
    backend: Optional[Union[ImageStoreBackend, str]] = None,
) -> ImageStoreGateway:
    """Instantiate the configured image-store backend."""

    backend_value = backend or IMAGE_STORE_MODE
    if isinstance(backend_value, ImageStoreBackend):
        backend_key = backend_value.value
    else:
        backend_key = str(backend_value).lower().strip()

    if backend_key == ImageStoreBackend.CLOUDINARY.value:
        return CloudinaryImageStore()

    raise ValueError(f"Unsupported image store backend: {backend_value}")
