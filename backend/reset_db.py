"""
Database Reset Script
Run this to drop all tables and rebuild the schema fresh.
"""

import asyncio
import sys
sys.path.append("src")

from infrastructure.config import APP_LOGGER, get_logger, get_settings, setup_logger
from infrastructure.database import Base, close_db, init_db
from infrastructure.database.session import get_engine

logger = get_logger("reset_db")


async def reset_database():
    """Drop all tables and recreate them."""
    engine = get_engine()
    try:
        # Registers every model on the metadata before drop_all.
        from infrastructure.database import models  # noqa: F401

        logger.info("Dropping all tables...")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("All tables dropped")

        await init_db(engine)
        logger.info("Fresh database ready")
    finally:
        await close_db()


if __name__ == "__main__":
    settings = get_settings()
    setup_logger(APP_LOGGER, level=settings.log_level, log_format="text")

    print(f"\nWARNING: This will DELETE ALL DATA in {settings.database_url}\n")
    response = input("Are you sure? Type 'yes' to continue: ")

    if response.lower() == "yes":
        asyncio.run(reset_database())
        print("\nDatabase has been reset.\n")
    else:
        print("\nCancelled.\n")
