"""Read-side service for the trade log."""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.core.constants import TransactionType
from broking_api.repositories.trade_log_repository import TradeLogDict, TradeLogRepository


class TradeLogService:
    """Lists trade log entries joined with instrument and goal details."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.trade_logs = TradeLogRepository(db)

    async def get_trade_logs_async(
        self,
        instrument_id: Optional[int] = None,
        goal_id: Optional[int] = None,
        transaction_type: Optional[TransactionType] = None
    ) -> List[TradeLogDict]:
        """Get trade log entries, newest first, optionally filtered."""
        return await self.trade_logs.get_all_with_details(
            instrument_id=instrument_id,
            goal_id=goal_id,
            transaction_type=transaction_type
        )
