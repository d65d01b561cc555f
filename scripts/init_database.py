#!/usr/bin/env python3
"""Create all referral, payout, purchase and KYC tables."""

import asyncio
import sys

from loguru import logger
from sqlalchemy.ext.asyncio import create_async_engine

from app.config.logging import setup_logging
from app.config.settings import settings
from app.models import Base


async def init_database(drop_existing: bool = False) -> None:
    """
    Create all database tables.

    Args:
        drop_existing: Drop every table first (development only)
    """
    if drop_existing and settings.is_production:
        logger.error("Refusing to drop tables in production")
        sys.exit(1)

    logger.info("Connecting to database...")
    engine = create_async_engine(settings.database_url, echo=False)

    try:
        async with engine.begin() as conn:
            if drop_existing:
                logger.warning("Dropping existing tables...")
                await conn.run_sync(Base.metadata.drop_all)
            logger.info("Creating tables (checkfirst=True)...")
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    finally:
        await engine.dispose()

    logger.success(
        f"Database tables ready: {', '.join(sorted(Base.metadata.tables))}"
    )


if __name__ == "__main__":
    setup_logging()
    asyncio.run(init_database(drop_existing="--drop" in sys.argv[1:]))
