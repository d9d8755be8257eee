"""Trade log model representing buy and sell transactions in the database."""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, Numeric, DateTime, Enum, ForeignKey

from broking_api.core.constants import TransactionType
from broking_api.db.base import Base


class TradeLog(Base):
    """
    Trade log entry - an immutable record of one buy or sell.

    Entries are only ever inserted by the trading operation and only ever
    removed by a cascade delete of their instrument. The foreign keys carry
    no ON DELETE rule; cascading is done by the instrument service.
    """
    __tablename__ = "trade_log"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Foreign Keys
    instrument_id = Column(Integer, ForeignKey("instruments.id"), nullable=False, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id"), nullable=True, index=True)

    # Transaction Values
    transaction_type = Column(
        Enum(TransactionType, name="transaction_type"),
        nullable=False,
        index=True
    )
    quantity = Column(Numeric(15, 4), nullable=False)
    price = Column(Numeric(12, 4), nullable=False)
    total_amount = Column(Numeric(15, 2), nullable=False)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True
    )

    def __repr__(self) -> str:
        return (
            f"<TradeLog(id={self.id}, instrument_id={self.instrument_id}, "
            f"type={self.transaction_type}, total_amount={self.total_amount})>"
        )
