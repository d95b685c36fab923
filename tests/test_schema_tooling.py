from infrastructure.database.models.products import Product
from scripts.seed_alembic_version import head_revision, missing_tables


def test_head_revision_is_read_from_migration_scripts():
    assert head_revision() == "20261019_users_and_products"


def test_stamping_requires_every_catalog_table():
    assert missing_tables(["users"]) == ["products"]
    assert missing_tables([]) == ["users", "products"]
    assert missing_tables(["alembic_version", "products", "users"]) == []


def test_deleting_a_user_never_cascades_to_products():
    (owner_fk,) = Product.__table__.c.owner_id.foreign_keys

    assert owner_fk.column.table.name == "users"
    assert owner_fk.ondelete is None
