"""Goal model representing savings targets in the database."""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Numeric, DateTime

from broking_api.db.base import Base


class Goal(Base):
    """Goal model - a named savings target trades can be tagged against."""
    __tablename__ = "goals"

    # Primary Key
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Goal Details
    name = Column(String(100), nullable=False, index=True)
    target_amount = Column(Numeric(15, 2), nullable=False)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<Goal(id={self.id}, name={self.name}, target_amount={self.target_amount})>"
