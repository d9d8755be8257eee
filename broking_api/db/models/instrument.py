"""Instrument model representing tradable assets in the database."""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum

from broking_api.core.constants import InstrumentType
from broking_api.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Instrument(Base):
    """Instrument model representing stocks, mutual funds and gold."""
    __tablename__ = "instruments"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Instrument Details
    symbol = Column(String(50), nullable=False, unique=True, index=True)
    name = Column(String(200), nullable=False)
    type = Column(Enum(InstrumentType, name="instrument_type"), nullable=False, index=True)
    current_price = Column(Numeric(12, 4), nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    def __repr__(self) -> str:
        return f"<Instrument(id={self.id}, symbol={self.symbol}, type={self.type})>"
