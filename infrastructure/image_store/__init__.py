from .cloudinary_store import CloudinaryImageStore
from .factory import ImageStoreBackend, create_image_store
from .gateway import ImageStoreGateway, ImageUpload, StoredImage, file_too_large

__all__ = [
    "ImageUpload",
    "StoredImage",
    "ImageStoreGateway",
    "CloudinaryImageStore",
    "ImageStoreBackend",
    "create_image_store",
    "file_too_large",
]
