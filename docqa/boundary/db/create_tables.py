"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, docqa.configs
System role: Database schema initialization

Usage:
    python -m docqa.boundary.db.create_tables
"""

import asyncio
import logging

from docqa.boundary.db.base import Base
from docqa.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
import docqa.boundary.db.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Raises:
        SQLAlchemyError: If database connection or table creation fails
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{__name__}:create_all_tables - Tables created", extra={"tables": sorted(Base.metadata.tables)})


if __name__ == "__main__":
    from docqa.observability.logger import configure_logging

    configure_logging()
    asyncio.run(create_all_tables())
