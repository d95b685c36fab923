from .authorization import ensure_owner, is_owner
from .product_service import ProductPage, ProductService

__all__ = [
    "ProductPage",
    "ProductService",
    "ensure_owner",
    "is_owner",
]
