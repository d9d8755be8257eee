"""Create the database tables and optionally load the sample portfolio data."""
import argparse
import asyncio
import logging

from broking_api.core.config import settings
from broking_api.db.init_db import create_tables, seed_sample_data
from broking_api.db.session import AsyncSessionLocal, dispose_engine

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


async def setup(drop: bool, seed: bool) -> None:
    print(f"Setting up database: {settings.database_url.split('@')[-1]}")
    try:
        await create_tables(drop_existing=drop)
        if seed:
            async with AsyncSessionLocal() as session:
                await seed_sample_data(session)
    finally:
        await dispose_engine()
    print("✓ Database ready")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--seed", action="store_true", help="insert sample instruments, goals and trades")
    args = parser.parse_args()

    asyncio.run(setup(drop=args.drop, seed=args.seed))
