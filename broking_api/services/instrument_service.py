"""Business logic service for Instruments."""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.core.constants import ColumnScale, InstrumentType, LedgerMessages
from broking_api.core.telemetry import get_tracer
from broking_api.db.models.instrument import Instrument
from broking_api.db.session import transaction
from broking_api.repositories.instrument_repository import InstrumentRepository
from broking_api.repositories.trade_log_repository import TradeLogRepository
from broking_api.schemas.common import is_stored_positive
from broking_api.schemas.instrument import InstrumentRequest
from broking_api.services.metrics_service import tracked_mutation
from broking_api.services.result_objects import (
    DeleteResult,
    ErrorCode,
    InstrumentResult
)

logger = logging.getLogger(__name__)

_INSTRUMENT_TYPES = {t.value for t in InstrumentType}


def validate_instrument_request(request: InstrumentRequest) -> Optional[str]:
    """Return the first validation message for an instrument body, or None if valid."""
    if not request.symbol or not request.name or not request.type or not request.current_price:
        return LedgerMessages.FIELDS_REQUIRED
    if request.type not in _INSTRUMENT_TYPES:
        return LedgerMessages.INVALID_INSTRUMENT_TYPE
    if not is_stored_positive(request.current_price, ColumnScale.PRICE):
        return LedgerMessages.PRICE_NOT_POSITIVE
    return None


def _duplicate_symbol_message(symbol: str) -> str:
    return f"Instrument with symbol {symbol} already exists"


class InstrumentService:
    """Service layer for Instruments, including the cascade delete policy."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.instruments = InstrumentRepository(db)
        self.trade_logs = TradeLogRepository(db)

    async def get_all_instruments_async(self) -> List[Instrument]:
        """Get every instrument, most recently created first."""
        return await self.instruments.get_all()

    async def get_instrument_async(self, instrument_id: int) -> InstrumentResult:
        """Get a single instrument by ID."""
        instrument = await self.instruments.get_by_id(instrument_id)
        if not instrument:
            return InstrumentResult.fail(ErrorCode.NOT_FOUND, LedgerMessages.INSTRUMENT_NOT_FOUND)

        return InstrumentResult(
            success=True,
            message=f"Found instrument {instrument.symbol}",
            instrument=instrument
        )

    @tracked_mutation("instrument", "create")
    async def create_instrument_async(self, request: InstrumentRequest) -> InstrumentResult:
        """
        Create a new instrument.

        Args:
            request: InstrumentRequest with symbol, name, type and current price

        Returns:
            InstrumentResult with the created instrument, or a validation/store failure
        """
        error = validate_instrument_request(request)
        if error:
            logger.warning(f"Rejected instrument create: {error}")
            return InstrumentResult.fail(ErrorCode.VALIDATION_ERROR, error)

        try:
            async with transaction(self.db):
                if await self.instruments.get_by_symbol(request.symbol):
                    return InstrumentResult.fail(
                        ErrorCode.VALIDATION_ERROR,
                        _duplicate_symbol_message(request.symbol)
                    )

                instrument = await self.instruments.create(
                    Instrument(
                        symbol=request.symbol,
                        name=request.name,
                        type=InstrumentType(request.type),
                        current_price=request.current_price
                    )
                )
        except IntegrityError:
            return InstrumentResult.fail(
                ErrorCode.VALIDATION_ERROR,
                _duplicate_symbol_message(request.symbol)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to create instrument {request.symbol}: {e}", exc_info=True)
            return InstrumentResult.fail(ErrorCode.STORE_ERROR, str(e))

        logger.info(f"Created instrument {instrument.id} ({instrument.symbol})")
        return InstrumentResult(
            success=True,
            message=f"Successfully added instrument {instrument.symbol}",
            instrument=instrument
        )

    @tracked_mutation("instrument", "update")
    async def update_instrument_async(
        self,
        instrument_id: int,
        request: InstrumentRequest
    ) -> InstrumentResult:
        """
        Replace the fields of an existing instrument.

        Validation runs before the lookup, so an invalid body is reported
        even for an unknown ID.
        """
        error = validate_instrument_request(request)
        if error:
            logger.warning(f"Rejected update of instrument {instrument_id}: {error}")
            return InstrumentResult.fail(ErrorCode.VALIDATION_ERROR, error)

        try:
            async with transaction(self.db):
                instrument = await self.instruments.get_by_id(instrument_id)
                if not instrument:
                    return InstrumentResult.fail(
                        ErrorCode.NOT_FOUND, LedgerMessages.INSTRUMENT_NOT_FOUND
                    )

                if request.symbol != instrument.symbol:
                    clash = await self.instruments.get_by_symbol(request.symbol)
                    if clash and clash.id != instrument_id:
                        return InstrumentResult.fail(
                            ErrorCode.VALIDATION_ERROR,
                            _duplicate_symbol_message(request.symbol)
                        )

                instrument = await self.instruments.update(instrument, {
                    "symbol": request.symbol,
                    "name": request.name,
                    "type": InstrumentType(request.type),
                    "current_price": request.current_price,
                })
        except IntegrityError:
            return InstrumentResult.fail(
                ErrorCode.VALIDATION_ERROR,
                _duplicate_symbol_message(request.symbol)
            )
        except SQLAlchemyError as e:
            logger.error(f"Failed to update instrument {instrument_id}: {e}", exc_info=True)
            return InstrumentResult.fail(ErrorCode.STORE_ERROR, str(e))

        logger.info(f"Updated instrument {instrument_id} ({instrument.symbol})")
        return InstrumentResult(
            success=True,
            message=f"Successfully updated instrument {instrument.symbol}",
            instrument=instrument
        )

    @tracked_mutation("instrument", "delete")
    async def delete_instrument_async(
        self,
        instrument_id: int,
        cascade: bool = False
    ) -> DeleteResult:
        """
        Delete an instrument.

        An instrument referenced by trade log entries is only removed when
        ``cascade`` is set; its entries are then deleted first, in the same
        transaction as the instrument itself.

        Args:
            instrument_id: Instrument ID to delete
            cascade: Also delete the instrument's trade history

        Returns:
            DeleteResult with the number of trade log entries removed
        """
        with get_tracer().start_as_current_span("instrument.delete") as span:
            span.set_attribute("instrument.id", instrument_id)
            span.set_attribute("instrument.cascade", cascade)

            try:
                async with transaction(self.db):
                    instrument = await self.instruments.get_by_id(instrument_id)
                    if not instrument:
                        return DeleteResult.fail(
                            ErrorCode.NOT_FOUND, LedgerMessages.INSTRUMENT_NOT_FOUND
                        )

                    trade_count = await self.trade_logs.count_by_instrument(instrument_id)
                    if trade_count > 0 and not cascade:
                        logger.warning(
                            f"Refused to delete instrument {instrument_id}: "
                            f"{trade_count} trade log entries reference it"
                        )
                        return DeleteResult.fail(
                            ErrorCode.CONFLICT, LedgerMessages.INSTRUMENT_HAS_TRADES
                        )

                    deleted_trade_logs = 0
                    if trade_count > 0:
                        deleted_trade_logs = await self.trade_logs.delete_by_instrument_id(
                            instrument_id
                        )

                    if not await self.instruments.delete_by_id(instrument_id):
                        # Removed concurrently; undo the trade log deletion
                        await self.db.rollback()
                        return DeleteResult.fail(
                            ErrorCode.NOT_FOUND, LedgerMessages.INSTRUMENT_NOT_FOUND
                        )
            except SQLAlchemyError as e:
                logger.error(f"Failed to delete instrument {instrument_id}: {e}", exc_info=True)
                return DeleteResult.fail(ErrorCode.STORE_ERROR, str(e))

            span.set_attribute("trade_log.deleted", deleted_trade_logs)

        if trade_count > 0:
            logger.info(
                f"Deleted instrument {instrument_id} and {deleted_trade_logs} trade log entries"
            )
            message = LedgerMessages.INSTRUMENT_CASCADE_DELETED
        else:
            logger.info(f"Deleted instrument {instrument_id}")
            message = LedgerMessages.INSTRUMENT_DELETED

        return DeleteResult(
            success=True,
            message=message,
            deleted_id=instrument_id,
            deleted_trade_logs=deleted_trade_logs
        )
