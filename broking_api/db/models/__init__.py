"""Models module initialization."""
from broking_api.db.models.goal import Goal
from broking_api.db.models.instrument import Instrument
from broking_api.db.models.trade_log import TradeLog

__all__ = [
    "Goal",
    "Instrument",
    "TradeLog",
]
