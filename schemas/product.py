from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from infrastructure.database.models.products import Product


class ProductCategory(str, Enum):
    ELECTRONICS = "Electronics"
    FASHION = "Fashion"
    HOME_AND_GARDEN = "Home & Garden"
    SPORTS = "Sports"
    BOOKS = "Books"
    TOYS = "Toys"
    HEALTH_AND_BEAUTY = "Health & Beauty"
    FOOD_AND_BEVERAGES = "Food & Beverages"
    AUTOMOTIVE = "Automotive"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str) -> "ProductCategory":
        """Resolve a category by its display value, e.g. ``"Home & Garden"``."""
        return cls(value.strip())


class ProductFields(BaseModel):
    """Validated field set for a new product; the image is handled separately."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    category: ProductCategory
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    in_stock: bool = True


class ProductPatch(BaseModel):
    """Partial update; fields left as ``None`` keep their stored value."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=1000)
    category: Optional[ProductCategory] = None
    price: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    in_stock: Optional[bool] = None

    def changes(self) -> dict:
        return self.model_dump(exclude_none=True)


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OwnerSummary(_CamelModel):
    id: UUID
    username: str
    shop_name: str
    email: Optional[str] = None

    @model_serializer(mode="wrap")
    def _omit_hidden_email(self, handler):
        # Contact email is only published on the single-product view.
        data = handler(self)
        if self.email is None:
            data.pop("email", None)
        return data


class ProductResponse(_CamelModel):
    id: UUID
    title: str
    description: str
    image_url: str = Field(..., alias="imageURL")
    category: ProductCategory
    price: Optional[float] = None
    in_stock: bool
    shop_id: UUID
    shop: Optional[OwnerSummary] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, product: "Product", *, include_owner_email: bool = False) -> "ProductResponse":
        owner = product.owner
        shop = None
        if owner is not None:
            shop = OwnerSummary(
                id=owner.id,
                username=owner.username,
                shop_name=owner.display_shop_name,
                email=owner.email if include_owner_email else None,
            )
        return cls(
            id=product.id,
            title=product.title,
            description=product.description,
            image_url=product.image_url,
            category=product.category,
            price=product.price,
            in_stock=product.in_stock,
            shop_id=product.owner_id,
            shop=shop,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class PaginationMeta(BaseModel):
    page: int
    pages: int
    total: int
    limit: int


class ProductData(BaseModel):
    product: ProductResponse


class ProductListData(BaseModel):
    products: List[ProductResponse] = Field(default_factory=list)
    pagination: PaginationMeta
