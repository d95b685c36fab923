from .auth import (
    AuthData,
    CurrentUserData,
    LoginRequest,
    RegisterRequest,
    UserResponse,
)
from .product import (
    OwnerSummary,
    PaginationMeta,
    ProductCategory,
    ProductData,
    ProductFields,
    ProductListData,
    ProductPatch,
    ProductResponse,
)
from .responses import ApiResponse, ErrorResponse

__all__ = [
    "ApiResponse",
    "ErrorResponse",
    "AuthData",
    "CurrentUserData",
    "LoginRequest",
    "RegisterRequest",
    "UserResponse",
    "OwnerSummary",
    "PaginationMeta",
    "ProductCategory",
    "ProductData",
    "ProductFields",
    "ProductListData",
    "ProductPatch",
    "ProductResponse",
]
