import asyncio
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from infrastructure.database.database import create_tables, drop_tables, engine  # noqa: E402

logger = logging.getLogger("reset_state")


async def reset_database() -> None:
    logger.info("Dropping users/products tables...")
    await drop_tables()

    logger.info("Recreating tables...")
    await create_tables()


async def main() -> None:
    try:
        await reset_database()
    finally:
        await engine.dispose()
    logger.info("Catalog state reset complete.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    asyncio.run(main())
