"""
Mark a database whose tables were created by ``create_tables()`` at API startup
as being at the migration head, so ``alembic upgrade`` starts from there.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from alembic.script import ScriptDirectory
from sqlalchemy import inspect, text

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infrastructure.database.database import Base, engine  # noqa: E402

MIGRATIONS_DIR = ROOT / "migrations"

logger = logging.getLogger("seed_alembic_version")


def head_revision(migrations_dir: Path = MIGRATIONS_DIR) -> str:
    head = ScriptDirectory(str(migrations_dir)).get_current_head()
    if head is None:
        raise RuntimeError(f"No alembic revisions found under {migrations_dir}")
    return head


def missing_tables(existing: Iterable[str]) -> List[str]:
    present = set(existing)
    return [table.name for table in Base.metadata.sorted_tables if table.name not in present]


async def stamp_head() -> str:
    revision = head_revision()
    async with engine.begin() as conn:
        existing = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        absent = missing_tables(existing)
        if absent:
            raise RuntimeError(
                "Refusing to stamp: tables {tables} do not exist yet. Start the API or run "
                "scripts/reset_state.py first.".format(tables=", ".join(absent))
            )

        await conn.execute(
            text(
                """
                CREATE TABLE IF NOT EXISTS alembic_version (
                    version_num VARCHAR(64) NOT NULL PRIMARY KEY
                )
                """
            )
        )
        await conn.execute(text("DELETE FROM alembic_version"))
        await conn.execute(
            text("INSERT INTO alembic_version(version_num) VALUES (:rev)"),
            {"rev": revision},
        )
    return revision


async def main() -> None:
    try:
        revision = await stamp_head()
    finally:
        await engine.dispose()
    logger.info("Stamped alembic_version with %s", revision)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(main())
