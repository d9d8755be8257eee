"""Pydantic schemas for trading requests and trade log responses."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from broking_api.core.constants import InstrumentType, TransactionType
from broking_api.schemas.common import Money


class TradeRequest(BaseModel):
    quantity: Optional[Decimal] = Field(None, examples=[10])
    price: Optional[Decimal] = Field(None, description="Price per unit", examples=[2400.00])
    goal_id: Optional[int] = Field(None, description="Optional goal to tag this trade against")


class TradeLogResponse(BaseModel):
    id: int
    instrument_id: int
    goal_id: Optional[int] = None
    transaction_type: TransactionType
    quantity: Money
    price: Money
    total_amount: Money
    created_at: datetime
    instrument_symbol: Optional[str] = None
    instrument_name: Optional[str] = None
    instrument_type: Optional[InstrumentType] = None
    goal_name: Optional[str] = None
