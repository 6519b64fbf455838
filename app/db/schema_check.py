import asyncio
import logging
from typing import List

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

from app.core.models import StoredDocument
from app.db.session import Base, engine

logger = logging.getLogger(__name__)


REQUIRED_TABLES: List[str] = [
    StoredDocument.__tablename__,
]


async def ensure_tables(db_engine: AsyncEngine) -> List[str]:
    """
    Ensure that all required tables exist in the connected database.
    Missing tables are created; existing ones are left untouched. Returns the created table names.
    """
    async with db_engine.begin() as conn:
        existing = await conn.run_sync(lambda sync_conn: set(inspect(sync_conn).get_table_names()))
        missing = [name for name in REQUIRED_TABLES if name not in existing]
        if missing:
            tables = [Base.metadata.tables[name] for name in missing]
            await conn.run_sync(Base.metadata.create_all, tables=tables)

    if missing:
        logger.info("Created missing tables: " + ", ".join(missing))
    else:
        logger.info("All required tables already exist in the database.")
    return missing


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    await ensure_tables(engine)


if __name__ == "__main__":
    asyncio.run(main())
