"""
Constants for instrument categories, transaction kinds and API messages.
"""
from decimal import Decimal
from enum import Enum


class InstrumentType(str, Enum):
    """Categories of tradable instruments."""
    STOCK = "STOCK"
    MF = "MF"        # Mutual fund
    GOLD = "GOLD"    # Gold and other precious metals


class TransactionType(str, Enum):
    """Kinds of trade log entries."""
    BUY = "BUY"
    SELL = "SELL"


class LedgerMessages:
    """User-facing messages shared by services and routers."""

    FIELDS_REQUIRED = "All fields are required"
    INVALID_INSTRUMENT_TYPE = "Type must be STOCK, MF, or GOLD"
    PRICE_NOT_POSITIVE = "current_price must be positive"
    TARGET_NOT_POSITIVE = "target_amount must be positive"

    INSTRUMENT_NOT_FOUND = "Instrument not found"
    GOAL_NOT_FOUND = "Goal not found"

    TRADE_FIELDS_REQUIRED = "quantity and price are required"
    TRADE_NOT_POSITIVE = "quantity and price must be positive"
    TRADE_TOTAL_NOT_POSITIVE = "total_amount must be positive"

    INSTRUMENT_HAS_TRADES = (
        "Cannot delete instrument with existing trade history. "
        "Please delete all related trade logs first or use ?cascade=true parameter."
    )
    GOAL_HAS_TRADES = (
        "Cannot delete goal with existing trade history. "
        "Please delete all related trade logs first."
    )

    INSTRUMENT_DELETED = "Instrument deleted"
    INSTRUMENT_CASCADE_DELETED = "Instrument and associated trade logs deleted"
    GOAL_DELETED = "Goal deleted"


class ColumnScale:
    """Smallest stored unit of each NUMERIC column (see db/models)."""

    QUANTITY = Decimal("0.0001")   # trade_log.quantity NUMERIC(15,4)
    PRICE = Decimal("0.0001")      # trade_log.price, instruments.current_price NUMERIC(12,4)
    AMOUNT = Decimal("0.01")       # trade_log.total_amount, goals.target_amount NUMERIC(15,2)
