"""Repository for Instruments data access."""
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.db.models.instrument import Instrument
from broking_api.repositories.base import BaseRepository


class InstrumentRepository(BaseRepository[Instrument]):
    """Repository for Instruments."""

    def __init__(self, db: AsyncSession):
        super().__init__(Instrument, db)

    async def get_by_symbol(self, symbol: str) -> Optional[Instrument]:
        """Get an instrument by its unique symbol."""
        result = await self.db.execute(
            select(Instrument).where(Instrument.symbol == symbol)
        )
        return result.scalar_one_or_none()
