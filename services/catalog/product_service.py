from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from infrastructure.database.models.products import Product
from infrastructure.database.repositories import ProductFilter, ProductRepository
from infrastructure.image_store import ImageStoreGateway, ImageUpload, create_image_store
from schemas.product import ProductCategory, ProductFields, ProductPatch
from services.catalog.authorization import ensure_owner
from services.errors import NotFoundError, ValidationError, validation_error_from

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found"


@dataclass(slots=True)
class ProductPage:
    items: List[Product] = field(default_factory=list)
    page: int = 1
    pages: int = 0
    total: int = 0
    limit: int = settings.DEFAULT_PAGE_SIZE


def parse_product_id(raw: Union[UUID, str, None]) -> UUID:
    """Malformed identifiers are reported the same way as unknown ones."""
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except (TypeError, ValueError) as exc:
        raise NotFoundError(PRODUCT_NOT_FOUND) from exc


def parse_category(raw: Union[ProductCategory, str, None]) -> Optional[ProductCategory]:
    if raw is None or isinstance(raw, ProductCategory):
        return raw
    if not raw.strip():
        return None
    try:
        return ProductCategory.parse(raw)
    except ValueError as exc:
        choices = ", ".join(c.value for c in ProductCategory)
        raise ValidationError(f"Category must be one of: {choices}") from exc


def parse_owner_id(raw: Union[UUID, str, None]) -> Optional[UUID]:
    if raw is None or isinstance(raw, UUID):
        return raw
    if not raw.strip():
        return None
    try:
        return UUID(raw.strip())
    except ValueError as exc:
        raise ValidationError("Invalid shop identifier") from exc


class ProductService:
    """Product catalog operations, including the image lifecycle of each product."""

    def __init__(
        self,
        db: Optional[AsyncSession],
        *,
        repository: ProductRepository | None = None,
        image_store: ImageStoreGateway | None = None,
    ) -> None:
        self.db = db
        self.repository = repository or ProductRepository(db)
        self._image_store = image_store

    @property
    def image_store(self) -> ImageStoreGateway:
        # Read-only endpoints never need image-store credentials.
        if self._image_store is None:
            self._image_store = create_image_store()
        return self._image_store

    async def create_product(
        self,
        *,
        owner_id: UUID,
        fields: Dict[str, Any],
        image: Optional[ImageUpload],
    ) -> Product:
        try:
            validated = ProductFields(**{k: v for k, v in fields.items() if v is not None})
        except PydanticValidationError as exc:
            raise validation_error_from(exc) from exc

        if image is None:
            raise ValidationError("Product image is required")
        image.validate()

        stored = await self.image_store.upload(image)
        try:
            product = await self.repository.create_product(
                owner_id=owner_id,
                title=validated.title,
                description=validated.description,
                category=validated.category,
                price=validated.price,
                in_stock=validated.in_stock,
                image_url=stored.url,
                image_public_id=stored.public_id,
            )
        except Exception:
            await self._discard_image(stored.public_id)
            raise

        logger.info("Created product %s for owner %s", product.id, owner_id)
        return product

    async def list_products(
        self,
        *,
        category: Union[ProductCategory, str, None] = None,
        owner_id: Union[UUID, str, None] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ProductPage:
        filters = ProductFilter(
            category=parse_category(category),
            owner_id=parse_owner_id(owner_id),
            search_text=search.strip() if search and search.strip() else None,
        )
        return await self._paginate(filters, page, limit)

    async def list_by_category(
        self,
        category: Union[ProductCategory, str],
        *,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_SIZE,
    ) -> ProductPage:
        parsed = parse_category(category)
        if parsed is None:
            raise ValidationError("Product category is required")
        return await self._paginate(ProductFilter(category=parsed), page, limit)

    async def get_product(self, product_id: Union[UUID, str]) -> Product:
        product = await self.repository.get_by_id(parse_product_id(product_id))
        if product is None:
            raise NotFoundError(PRODUCT_NOT_FOUND)
        return product

    async def update_product(
        self,
        product_id: Union[UUID, str],
        *,
        requester_id: UUID,
        patch: Dict[str, Any],
        new_image: Optional[ImageUpload] = None,
    ) -> Product:
        product = await self.get_product(product_id)
        ensure_owner(requester_id, product.owner_id, action="update")

        try:
            changes = ProductPatch(**{k: v for k, v in patch.items() if v is not None}).changes()
        except PydanticValidationError as exc:
            raise validation_error_from(exc) from exc

        previous_public_id = None
        if new_image is not None:
            new_image.validate()
            # Upload first: a failed upload leaves the product and its old image untouched.
            stored = await self.image_store.upload(new_image)
            previous_public_id = product.image_public_id
            changes["image_url"] = stored.url
            changes["image_public_id"] = stored.public_id

        try:
            product = await self.repository.update_product(product, **changes)
        except Exception:
            if new_image is not None:
                await self._discard_image(changes["image_public_id"])
            raise

        if previous_public_id:
            await self._discard_image(previous_public_id)

        logger.info("Updated product %s (%s)", product.id, ", ".join(sorted(changes)) or "no changes")
        return product

    async def delete_product(self, product_id: Union[UUID, str], *, requester_id: UUID) -> None:
        product = await self.get_product(product_id)
        ensure_owner(requester_id, product.owner_id, action="delete")

        if product.image_public_id:
            await self._discard_image(product.image_public_id)

        await self.repository.delete_product(product)
        logger.info("Deleted product %s", product.id)

    async def _paginate(self, filters: ProductFilter, page: int, limit: int) -> ProductPage:
        if page < 1:
            raise ValidationError("Page must be a positive integer")
        if limit < 1:
            raise ValidationError("Limit must be a positive integer")
        limit = min(limit, settings.MAX_PAGE_SIZE)

        items, total = await self.repository.list_products(
            filters,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return ProductPage(
            items=list(items),
            page=page,
            pages=math.ceil(total / limit),
            total=total,
            limit=limit,
        )

    async def _discard_image(self, public_id: str) -> None:
        """Best-effort removal; a failure is logged and never blocks the caller."""
        try:
            await self.image_store.delete(public_id)
        except Exception:
            logger.exception("Failed to delete image %s from the image store", public_id)
