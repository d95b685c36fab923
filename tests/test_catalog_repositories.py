import asyncio
import os
import uuid

import pytest
from sqlalchemy import text

from infrastructure.database.database import create_tables, engine, get_db
from infrastructure.database.repositories import ProductFilter, ProductRepository, UserRepository
from schemas.product import ProductCategory
from services.errors import ConflictError

RUN_DB_TESTS = os.getenv("RUN_DB_TESTS") == "1"


@pytest.mark.skipif(not RUN_DB_TESTS, reason="PostgreSQL-backed tests disabled by default")
def test_repositories_enforce_uniqueness_and_search_catalog():
    async def workflow() -> None:
        await create_tables()

        async with engine.begin() as conn:
            await conn.execute(text("TRUNCATE products, users RESTART IDENTITY CASCADE"))

        db_gen = get_db()
        session = await db_gen.__anext__()
        try:
            users = UserRepository(session)
            products = ProductRepository(session)

            owner = await users.create_user(
                username="gallery-owner",
                email="owner@example.com",
                password_hash="hash",
                shop_name=None,
            )
            owner_id = owner.id
            with pytest.raises(ConflictError) as excinfo:
                await users.create_user(
                    username="someone-else",
                    email="owner@example.com",
                    password_hash="hash",
                    shop_name=None,
                )
            assert excinfo.value.field == "email"

            # The failed insert ran in a savepoint; the session stays usable.
            assert await users.get_by_email("owner@example.com") is not None

            for index, (title, category) in enumerate(
                [
                    ("Wireless keyboard", ProductCategory.ELECTRONICS),
                    ("Mechanical keyboard", ProductCategory.ELECTRONICS),
                    ("Garden hose", ProductCategory.HOME_AND_GARDEN),
                ]
            ):
                await products.create_product(
                    owner_id=owner_id,
                    title=title,
                    description=f"{title} in stock now",
                    category=category,
                    image_url=f"https://images.test/{index}.png",
                    image_public_id=f"product-gallery/{index}",
                    price=10.0 * (index + 1),
                )

            keyboards, total = await products.list_products(
                ProductFilter(category=ProductCategory.ELECTRONICS, search_text="keyboards"),
                offset=0,
                limit=10,
            )
            assert total == 2
            assert [p.title for p in keyboards] == ["Mechanical keyboard", "Wireless keyboard"]
            assert all(p.owner.username == "gallery-owner" for p in keyboards)

            page, total = await products.list_products(
                ProductFilter(owner_id=owner_id),
                offset=2,
                limit=2,
            )
            assert total == 3
            assert [p.title for p in page] == ["Wireless keyboard"]

            missing = await products.get_by_id(uuid.uuid4())
            assert missing is None

            hose = (await products.list_products(ProductFilter(search_text="hose"), offset=0, limit=1))[0][0]
            await products.delete_product(hose)
            assert await products.get_by_id(hose.id) is None
        finally:
            try:
                await db_gen.athrow(RuntimeError("rollback test data"))
            except RuntimeError:
                pass

        await engine.dispose()

    asyncio.run(workflow())
