"""
Database table creation script.

Creates all tables defined in ORM models using SQLAlchemy metadata.

Dependencies: sqlalchemy, csv_processor.configs
System role: Database schema initialization

Usage:
    python -m csv_processor.boundary.db.create_tables
"""

import asyncio
import logging

from csv_processor.boundary.db.base import Base
from csv_processor.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
from csv_processor.boundary.db.models.csv_job_model import CsvJobModel  # noqa: F401
from csv_processor.boundary.db.models.csv_record_model import CsvRecordModel  # noqa: F401
from csv_processor.observability.logger import configure_logging

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """
    Create all database tables from registered ORM models.

    Idempotent: calls CREATE TABLE IF NOT EXISTS for each model, so safe
    to run multiple times. Existing tables remain unchanged.

    Raises:
        SQLAlchemyError: If database connection fails or table creation fails
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("All tables created successfully.")


async def drop_all_tables() -> None:
    """
    Drop all database tables and their data.

    WARNING: Irreversible data loss. Only use in development environments.
    """
    engine = get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("All tables dropped successfully.")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(create_all_tables())
