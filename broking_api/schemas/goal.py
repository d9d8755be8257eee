"""Pydantic schemas for Goals API requests and responses."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from broking_api.schemas.common import Money


class GoalRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=100, examples=["Retirement Fund"])
    target_amount: Optional[Decimal] = Field(None, examples=[5000000.00])


class GoalResponse(BaseModel):
    id: int
    name: str
    target_amount: Money
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
