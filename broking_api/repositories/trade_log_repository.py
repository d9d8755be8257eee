"""Repository for Trade Log data access."""
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, TypedDict

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.core.constants import TransactionType
from broking_api.db.models.goal import Goal
from broking_api.db.models.instrument import Instrument
from broking_api.db.models.trade_log import TradeLog
from broking_api.repositories.base import BaseRepository


class TradeLogDict(TypedDict):
    """Trade log entry joined with instrument and goal display fields."""
    id: int
    instrument_id: int
    goal_id: Optional[int]
    transaction_type: Any  # TransactionType
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    created_at: datetime
    instrument_symbol: Optional[str]
    instrument_name: Optional[str]
    instrument_type: Any  # InstrumentType
    goal_name: Optional[str]


class TradeLogRepository(BaseRepository[TradeLog]):
    """Repository for the trade log, including the joined read-side projection."""

    def __init__(self, db: AsyncSession):
        super().__init__(TradeLog, db)

    def _detail_query(self):
        """Trade log rows LEFT JOINed with instrument and goal display fields."""
        return (
            select(
                TradeLog,
                Instrument.symbol.label("instrument_symbol"),
                Instrument.name.label("instrument_name"),
                Instrument.type.label("instrument_type"),
                Goal.name.label("goal_name")
            )
            .outerjoin(Instrument, TradeLog.instrument_id == Instrument.id)
            .outerjoin(Goal, TradeLog.goal_id == Goal.id)
        )

    @staticmethod
    def _to_detail_dict(row) -> TradeLogDict:
        trade = row[0]
        return {
            "id": trade.id,
            "instrument_id": trade.instrument_id,
            "goal_id": trade.goal_id,
            "transaction_type": trade.transaction_type,
            "quantity": trade.quantity,
            "price": trade.price,
            "total_amount": trade.total_amount,
            "created_at": trade.created_at,
            "instrument_symbol": row[1],
            "instrument_name": row[2],
            "instrument_type": row[3],
            "goal_name": row[4],
        }

    async def get_all_with_details(
        self,
        instrument_id: Optional[int] = None,
        goal_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None
    ) -> List[TradeLogDict]:
        """Get trade log entries with instrument and goal details, newest first."""
        query = self._detail_query()

        if instrument_id is not None:
            query = query.where(TradeLog.instrument_id == instrument_id)
        if goal_id is not None:
            query = query.where(TradeLog.goal_id == goal_id)
        if transaction_type is not None:
            query = query.where(TradeLog.transaction_type == transaction_type)

        result = await self.db.execute(
            query.order_by(TradeLog.created_at.desc(), TradeLog.id.desc())
        )
        return [self._to_detail_dict(row) for row in result.all()]

    async def get_with_details(self, trade_id: int) -> Optional[TradeLogDict]:
        """Get a single trade log entry with instrument and goal details."""
        result = await self.db.execute(
            self._detail_query().where(TradeLog.id == trade_id)
        )
        row = result.first()
        return self._to_detail_dict(row) if row else None

    async def count_by_instrument(self, instrument_id: int) -> int:
        """Count trade log entries referencing an instrument."""
        result = await self.db.execute(
            select(func.count())
            .select_from(TradeLog)
            .where(TradeLog.instrument_id == instrument_id)
        )
        return result.scalar_one()

    async def count_by_goal(self, goal_id: int) -> int:
        """Count trade log entries referencing a goal."""
        result = await self.db.execute(
            select(func.count())
            .select_from(TradeLog)
            .where(TradeLog.goal_id == goal_id)
        )
        return result.scalar_one()

    async def delete_by_instrument_id(self, instrument_id: int) -> int:
        """Delete every trade log entry of an instrument. Returns the number removed."""
        result = await self.db.execute(
            delete(TradeLog).where(TradeLog.instrument_id == instrument_id)
        )
        await self.db.flush()
        return result.rowcount
