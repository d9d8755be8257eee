from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.api.responses import error_response
from broking_api.db.session import get_db
from broking_api.schemas.common import ErrorResponse, InstrumentDeleteResponse
from broking_api.schemas.instrument import InstrumentRequest, InstrumentResponse
from broking_api.services.instrument_service import InstrumentService

router = APIRouter(prefix="/instruments", tags=["Instruments"])

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_instrument_service(db: AsyncSession = Depends(get_db)) -> InstrumentService:
    """Dependency to get InstrumentService instance."""
    return InstrumentService(db)


@router.get("", response_model=List[InstrumentResponse])
async def list_instruments(service: InstrumentService = Depends(get_instrument_service)):
    """Get all instruments, most recently created first."""
    instruments = await service.get_all_instruments_async()
    return [InstrumentResponse.model_validate(i) for i in instruments]


@router.get("/{instrument_id}", response_model=InstrumentResponse, responses=_ERROR_RESPONSES)
async def get_instrument(
    instrument_id: int,
    service: InstrumentService = Depends(get_instrument_service)
):
    """
    Get instrument by ID.

    Responses:
        200: Instrument details
        404: Instrument not found
    """
    result = await service.get_instrument_async(instrument_id)
    if not result.success:
        return error_response(result)
    return InstrumentResponse.model_validate(result.instrument)


@router.post(
    "",
    response_model=InstrumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERROR_RESPONSES
)
async def create_instrument(
    request: InstrumentRequest,
    service: InstrumentService = Depends(get_instrument_service)
):
    """
    Add a new instrument.

    Responses:
        201: Instrument added
        400: Missing fields, unknown type, non-positive price or duplicate symbol
        500: Database error
    """
    result = await service.create_instrument_async(request)
    if not result.success:
        return error_response(result)
    return InstrumentResponse.model_validate(result.instrument)


@router.put("/{instrument_id}", response_model=InstrumentResponse, responses=_ERROR_RESPONSES)
async def update_instrument(
    instrument_id: int,
    request: InstrumentRequest,
    service: InstrumentService = Depends(get_instrument_service)
):
    """
    Update an instrument.

    Responses:
        200: Instrument updated
        400: Invalid request data
        404: Instrument not found
        500: Database error
    """
    result = await service.update_instrument_async(instrument_id, request)
    if not result.success:
        return error_response(result)
    return InstrumentResponse.model_validate(result.instrument)


@router.delete(
    "/{instrument_id}",
    response_model=InstrumentDeleteResponse,
    response_model_exclude_none=True,
    responses=_ERROR_RESPONSES
)
async def delete_instrument(
    instrument_id: int,
    cascade: bool = Query(False, description="Also delete the instrument's trade history"),
    service: InstrumentService = Depends(get_instrument_service)
):
    """
    Delete an instrument.

    Instruments with trade history can only be deleted with ``?cascade=true``,
    which removes the history and the instrument together.

    Responses:
        200: Instrument deleted
        400: Instrument has trade history and cascade was not requested
        404: Instrument not found
        500: Database error
    """
    result = await service.delete_instrument_async(instrument_id, cascade=cascade)
    if not result.success:
        return error_response(result)

    return InstrumentDeleteResponse(
        message=result.message,
        deleted_trade_logs=result.deleted_trade_logs or None
    )
