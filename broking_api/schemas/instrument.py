"""Pydantic schemas for Instruments API requests and responses."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from broking_api.core.constants import InstrumentType
from broking_api.schemas.common import Money


class InstrumentRequest(BaseModel):
    """
    Body for creating or replacing an instrument.

    Fields are optional at the schema level so that missing values and an
    unknown type reach the service and are reported with its messages.
    """
    symbol: Optional[str] = Field(None, max_length=50, examples=["RELIANCE"])
    name: Optional[str] = Field(None, max_length=200, examples=["Reliance Industries Ltd"])
    type: Optional[str] = Field(None, examples=["STOCK"])
    current_price: Optional[Decimal] = Field(None, examples=[2450.50])


class InstrumentResponse(BaseModel):
    id: int
    symbol: str
    name: str
    type: InstrumentType
    current_price: Money
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
