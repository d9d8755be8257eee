"""Trading and trade log endpoints."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.api.responses import error_response
from broking_api.core.constants import TransactionType
from broking_api.db.session import get_db
from broking_api.schemas.common import ErrorResponse
from broking_api.schemas.trade_log import TradeLogResponse, TradeRequest
from broking_api.services.trade_log_service import TradeLogService
from broking_api.services.trading_service import TradingService

router = APIRouter(tags=["Trading"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_trading_service(db: AsyncSession = Depends(get_db)) -> TradingService:
    """Dependency to get TradingService instance."""
    return TradingService(db)


def get_trade_log_service(db: AsyncSession = Depends(get_db)) -> TradeLogService:
    """Dependency to get TradeLogService instance."""
    return TradeLogService(db)


@router.get("/trade-log", response_model=List[TradeLogResponse], tags=["Trade Log"])
async def list_trade_log(
    instrument_id: Optional[int] = Query(None),
    goal_id: Optional[int] = Query(None),
    transaction_type: Optional[TransactionType] = Query(None),
    service: TradeLogService = Depends(get_trade_log_service)
):
    """Get all trade log entries with instrument and goal details, newest first."""
    trades = await service.get_trade_logs_async(
        instrument_id=instrument_id,
        goal_id=goal_id,
        transaction_type=transaction_type
    )
    return [TradeLogResponse(**t) for t in trades]


@router.post(
    "/instruments/{instrument_id}/buy",
    response_model=TradeLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES
)
async def buy_instrument(
    instrument_id: int,
    request: TradeRequest,
    service: TradingService = Depends(get_trading_service)
):
    """
    Buy an instrument and record the trade.

    Responses:
        201: Buy recorded; returns the trade log entry
        400: Missing or non-positive quantity/price, or unknown goal_id
        404: Instrument not found
        500: Database error
    """
    result = await service.buy_async(
        instrument_id, request.quantity, request.price, request.goal_id
    )
    if not result.success:
        return error_response(result)
    return TradeLogResponse(**result.trade)


@router.post(
    "/instruments/{instrument_id}/sell",
    response_model=TradeLogResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES
)
async def sell_instrument(
    instrument_id: int,
    request: TradeRequest,
    service: TradingService = Depends(get_trading_service)
):
    """
    Sell an instrument and record the trade.

    No holdings are checked; any positive quantity can be sold.

    Responses:
        201: Sell recorded; returns the trade log entry
        400: Missing or non-positive quantity/price, or unknown goal_id
        404: Instrument not found
        500: Database error
    """
    result = await service.sell_async(
        instrument_id, request.quantity, request.price, request.goal_id
    )
    if not result.success:
        return error_response(result)
    return TradeLogResponse(**result.trade)
