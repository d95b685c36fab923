from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.database.models.products import Product
from schemas.product import ProductCategory


@dataclass(slots=True)
class ProductFilter:
    """Exact-match filters AND-combined with an optional full-text query."""

    category: Optional[ProductCategory] = None
    owner_id: Optional[UUID] = None
    search_text: Optional[str] = None


class ProductRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    def _conditions(self, filters: ProductFilter) -> List:
        conditions = []
        if filters.category is not None:
            conditions.append(Product.category == filters.category)
        if filters.owner_id is not None:
            conditions.append(Product.owner_id == filters.owner_id)
        if filters.search_text:
            query = func.plainto_tsquery("english", filters.search_text)
            conditions.append(Product.search_vector.op("@@")(query))
        return conditions

    async def create_product(
        self,
        *,
        owner_id: UUID,
        title: str,
        description: str,
        category: ProductCategory,
        image_url: str,
        image_public_id: str,
        price: Optional[float] = None,
        in_stock: bool = True,
    ) -> Product:
        product = Product(
            owner_id=owner_id,
            title=title,
            description=description,
            category=category,
            image_url=image_url,
            image_public_id=image_public_id,
            price=price,
            in_stock=in_stock,
        )
        self.db.add(product)
        await self.db.flush()
        await self.db.refresh(product, attribute_names=["owner"])
        return product

    async def get_by_id(self, product_id: UUID) -> Optional[Product]:
        stmt = select(Product).where(Product.id == product_id)
        result = await self.db.execute(stmt)
        return result.unique().scalar_one_or_none()

    async def list_products(
        self,
        filters: ProductFilter,
        *,
        offset: int,
        limit: int,
    ) -> Tuple[Sequence[Product], int]:
        """Return one page of products, newest first, plus the total match count."""
        conditions = self._conditions(filters)

        count_stmt = select(func.count()).select_from(Product).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(Product)
            .where(*conditions)
            .order_by(Product.created_at.desc(), Product.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return result.unique().scalars().all(), total

    async def update_product(self, product: Product, **changes) -> Product:
        for key, value in changes.items():
            setattr(product, key, value)
        await self.db.flush()
        return product

    async def delete_product(self, product: Product) -> None:
        await self.db.delete(product)
        await self.db.flush()
