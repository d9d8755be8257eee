"""Trading operation: record a buy or sell against an instrument."""
import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.core.constants import ColumnScale, LedgerMessages, TransactionType
from broking_api.core.telemetry import get_tracer
from broking_api.db.models.trade_log import TradeLog
from broking_api.db.session import transaction
from broking_api.repositories.goal_repository import GoalRepository
from broking_api.repositories.instrument_repository import InstrumentRepository
from broking_api.repositories.trade_log_repository import TradeLogRepository
from broking_api.schemas.common import is_stored_positive
from broking_api.services.metrics_service import get_metrics_service
from broking_api.services.result_objects import ErrorCode, TradeResult

logger = logging.getLogger(__name__)


def validate_trade(quantity: Optional[Decimal], price: Optional[Decimal]) -> Optional[str]:
    """Return the first validation message for a trade, or None if valid."""
    if not quantity or not price:
        return LedgerMessages.TRADE_FIELDS_REQUIRED
    if not (
        is_stored_positive(quantity, ColumnScale.QUANTITY)
        and is_stored_positive(price, ColumnScale.PRICE)
    ):
        return LedgerMessages.TRADE_NOT_POSITIVE
    if not is_stored_positive(quantity * price, ColumnScale.AMOUNT):
        return LedgerMessages.TRADE_TOTAL_NOT_POSITIVE
    return None


class TradingService:
    """
    Records buy and sell transactions in the trade log.

    BUY and SELL are the same operation parameterized by kind. No position
    or cash balance exists, so a SELL is never checked against holdings.
    """

    def __init__(self, db: AsyncSession):
        self.db = db
        self.instruments = InstrumentRepository(db)
        self.goals = GoalRepository(db)
        self.trade_logs = TradeLogRepository(db)
        self.metrics = get_metrics_service()

    async def buy_async(
        self,
        instrument_id: int,
        quantity: Optional[Decimal],
        price: Optional[Decimal],
        goal_id: Optional[int] = None
    ) -> TradeResult:
        """Record a BUY of an instrument."""
        return await self.execute_trade_async(
            instrument_id, TransactionType.BUY, quantity, price, goal_id
        )

    async def sell_async(
        self,
        instrument_id: int,
        quantity: Optional[Decimal],
        price: Optional[Decimal],
        goal_id: Optional[int] = None
    ) -> TradeResult:
        """Record a SELL of an instrument."""
        return await self.execute_trade_async(
            instrument_id, TransactionType.SELL, quantity, price, goal_id
        )

    async def execute_trade_async(
        self,
        instrument_id: int,
        transaction_type: TransactionType,
        quantity: Optional[Decimal],
        price: Optional[Decimal],
        goal_id: Optional[int] = None
    ) -> TradeResult:
        """
        Validate a trade and append it to the trade log.

        Lookups, the insert and the re-read run in one transaction; a
        failure at any step leaves no trade log entry behind.

        Args:
            instrument_id: Instrument being traded (from the request path)
            transaction_type: BUY or SELL
            quantity: Units traded, must be positive
            price: Price per unit, must be positive
            goal_id: Optional goal to tag the trade against

        Returns:
            TradeResult whose ``trade`` is the inserted entry joined with
            instrument and goal display fields
        """
        result = await self._execute(instrument_id, transaction_type, quantity, price, goal_id)
        self.metrics.increment_trades(
            transaction_type.value,
            "success" if result.success else result.error_code.value
        )
        return result

    async def _execute(
        self,
        instrument_id: int,
        transaction_type: TransactionType,
        quantity: Optional[Decimal],
        price: Optional[Decimal],
        goal_id: Optional[int]
    ) -> TradeResult:
        error = validate_trade(quantity, price)
        if error:
            logger.warning(f"Rejected {transaction_type.value} of instrument {instrument_id}: {error}")
            return TradeResult.fail(ErrorCode.VALIDATION_ERROR, error)

        with get_tracer().start_as_current_span("trading.execute") as span:
            span.set_attribute("instrument.id", instrument_id)
            span.set_attribute("trade.transaction_type", transaction_type.value)

            try:
                async with transaction(self.db):
                    instrument = await self.instruments.get_by_id(instrument_id)
                    if not instrument:
                        return TradeResult.fail(
                            ErrorCode.NOT_FOUND, LedgerMessages.INSTRUMENT_NOT_FOUND
                        )

                    # A goal that does not resolve is bad request input, not a missing resource.
                    # Only null means untagged; goal_id 0 is looked up like any other id.
                    if goal_id is not None and not await self.goals.get_by_id(goal_id):
                        return TradeResult.fail(
                            ErrorCode.VALIDATION_ERROR, LedgerMessages.GOAL_NOT_FOUND
                        )

                    total_amount = quantity * price

                    entry = await self.trade_logs.create(
                        TradeLog(
                            instrument_id=instrument_id,
                            goal_id=goal_id,
                            transaction_type=transaction_type,
                            quantity=quantity,
                            price=price,
                            total_amount=total_amount
                        )
                    )
                    trade = await self.trade_logs.get_with_details(entry.id)
            except SQLAlchemyError as e:
                logger.error(
                    f"Failed to record {transaction_type.value} of instrument {instrument_id}: {e}",
                    exc_info=True
                )
                return TradeResult.fail(ErrorCode.STORE_ERROR, str(e))

            span.set_attribute("trade_log.id", entry.id)

        logger.info(
            f"Recorded {transaction_type.value} #{entry.id}: {quantity} x {instrument.symbol} "
            f"@ {price} = {total_amount}"
        )
        return TradeResult(
            success=True,
            message=f"{transaction_type.value} transaction recorded for {instrument.symbol}",
            trade=trade
        )
