"""Shared Pydantic types and response bodies."""
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, PlainSerializer

# Monetary values stay Decimal inside the application and leave the API as JSON numbers
Money = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json")
]


def is_stored_positive(value: Decimal, scale: Decimal) -> bool:
    """
    Whether a NUMERIC column with the given scale stores ``value`` as a
    positive number. PostgreSQL rounds half away from zero, so 0.00004 in a
    scale-4 column is stored as 0.
    """
    if value <= 0:
        return False
    if value >= 1:
        return True
    return value.quantize(scale, rounding=ROUND_HALF_UP) > 0


class ErrorResponse(BaseModel):
    error: str


class MessageResponse(BaseModel):
    message: str


class InstrumentDeleteResponse(MessageResponse):
    deleted_trade_logs: Optional[int] = None
