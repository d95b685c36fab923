from .product_repository import ProductFilter, ProductRepository
from .user_repository import UserRepository

__all__ = [
    "ProductFilter",
    "ProductRepository",
    "UserRepository",
]
