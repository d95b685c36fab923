from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Computed,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    String,
    Uuid,
)
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.orm import deferred, relationship

from infrastructure.database.database import Base
from schemas.product import ProductCategory

SEARCH_VECTOR_EXPRESSION = (
    "to_tsvector('english', coalesce(title, '') || ' ' || coalesce(description, ''))"
)


class Product(Base):
    __tablename__ = "products"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(String(1000), nullable=False)
    image_url = Column(String(1024), nullable=False)
    image_public_id = Column(String(255), nullable=False)
    owner_id = Column(
        Uuid,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    category = Column(
        Enum(
            ProductCategory,
            name="product_category",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        index=True,
    )
    price = Column(Float, nullable=True)
    in_stock = Column(Boolean, nullable=False, default=True)
    search_vector = deferred(Column(TSVECTOR, Computed(SEARCH_VECTOR_EXPRESSION, persisted=True)))
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    owner = relationship("User", back_populates="products", lazy="joined")

    __table_args__ = (
        CheckConstraint("price IS NULL OR price >= 0", name="ck_products_price_non_negative"),
        Index("ix_products_search_vector", "search_vector", postgresql_using="gin"),
    )
