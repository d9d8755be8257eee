"""Result objects for service layer operations."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any

from broking_api.repositories.trade_log_repository import TradeLogDict


class ErrorCode(str, Enum):
    """Standardized error codes for service operations."""
    NONE = "none"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORE_ERROR = "store_error"


@dataclass
class ServiceResult:
    """Base result object for service operations."""
    success: bool
    message: str
    errors: list[str] = field(default_factory=list)
    error_code: ErrorCode = ErrorCode.NONE

    @classmethod
    def fail(cls, error_code: ErrorCode, message: str, **kwargs: Any):
        """Build a failed result of this type whose only error is ``message``."""
        return cls(
            success=False,
            message=message,
            errors=[message],
            error_code=error_code,
            **kwargs
        )


@dataclass
class InstrumentResult(ServiceResult):
    """Result for instrument get/create/update operations."""
    instrument: Optional[Any] = None  # Instrument model


@dataclass
class GoalResult(ServiceResult):
    """Result for goal get/create/update operations."""
    goal: Optional[Any] = None  # Goal model


@dataclass
class DeleteResult(ServiceResult):
    """Result for instrument/goal delete operations."""
    deleted_id: Optional[int] = None
    deleted_trade_logs: int = 0


@dataclass
class TradeResult(ServiceResult):
    """Result for the buy/sell operation."""
    trade: Optional[TradeLogDict] = None
