"""Database session management and connection pooling."""
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from broking_api.core.config import settings
from broking_api.db.base import Base  # noqa: F401

# Process-wide async engine; disposed by the application lifespan on shutdown
engine = create_async_engine(
    settings.async_database_url,
    pool_size=settings.database_pool_size,
    max_overflow=settings.database_max_overflow,
    echo=settings.database_echo,
    future=True,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function to get database session.

    Usage in FastAPI:
        @router.get("/endpoint")
        async def endpoint(db: AsyncSession = Depends(get_db)):
            result = await db.execute(select(Model))
            return result.scalars().all()
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transaction(db: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Run a block of statements as one unit of work.

    Commits when the block exits normally and rolls back on any exception,
    which is re-raised to the caller.

    Usage:
        async with transaction(self.db):
            await repo.delete_by_instrument_id(instrument_id)
            await repo.delete_by_id(instrument_id)
    """
    try:
        yield db
        await db.commit()
    except BaseException:
        await db.rollback()
        raise


async def dispose_engine() -> None:
    """Close every pooled connection. Called once on application shutdown."""
    await engine.dispose()
