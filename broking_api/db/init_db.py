"""Schema creation and sample data for a fresh database."""
import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.core.constants import InstrumentType, TransactionType
from broking_api.db.base import Base
from broking_api.db.models import Goal, Instrument, TradeLog
from broking_api.db.session import engine, transaction

logger = logging.getLogger(__name__)

SAMPLE_INSTRUMENTS = [
    ("RELIANCE", "Reliance Industries Ltd", InstrumentType.STOCK, "2450.50"),
    ("TCS", "Tata Consultancy Services", InstrumentType.STOCK, "3250.75"),
    ("INFY", "Infosys Ltd", InstrumentType.STOCK, "1450.25"),
    ("HDFC_BANK", "HDFC Bank Ltd", InstrumentType.STOCK, "1650.80"),
    ("ICICI_BANK", "ICICI Bank Ltd", InstrumentType.STOCK, "950.45"),
    ("HDFC_TOP100", "HDFC Top 100 Fund", InstrumentType.MF, "650.45"),
    ("SBI_SMALL_CAP", "SBI Small Cap Fund", InstrumentType.MF, "125.30"),
    ("AXIS_BLUECHIP", "Axis Bluechip Fund", InstrumentType.MF, "45.75"),
    ("MIRAE_EMERGING", "Mirae Asset Emerging Bluechip Fund", InstrumentType.MF, "35.20"),
    ("GOLD_24K", "24K Gold per gram", InstrumentType.GOLD, "6250.00"),
    ("SILVER", "Silver per gram", InstrumentType.GOLD, "78.50"),
    ("PLATINUM", "Platinum per gram", InstrumentType.GOLD, "3200.00"),
]

SAMPLE_GOALS = [
    ("Retirement Fund", "5000000.00"),
    ("House Purchase", "2000000.00"),
    ("Emergency Fund", "500000.00"),
    ("Child Education", "1500000.00"),
    ("Vacation Fund", "300000.00"),
    ("Car Purchase", "800000.00"),
]

# (instrument index, goal index, type, quantity, price), indexes 1-based into the lists above
SAMPLE_TRADES = [
    (1, 1, TransactionType.BUY, "10", "2400.00"),
    (3, 1, TransactionType.BUY, "50", "650.00"),
    (5, 2, TransactionType.BUY, "5", "6200.00"),
    (1, 1, TransactionType.SELL, "5", "2450.00"),
    (2, 3, TransactionType.BUY, "15", "3200.00"),
    (4, 4, TransactionType.BUY, "20", "1600.00"),
    (6, 1, TransactionType.BUY, "100", "650.00"),
    (7, 2, TransactionType.BUY, "500", "125.00"),
    (10, 5, TransactionType.BUY, "10", "6200.00"),
    (11, 6, TransactionType.BUY, "100", "78.00"),
    (2, 3, TransactionType.SELL, "5", "3250.00"),
    (8, 1, TransactionType.BUY, "200", "45.00"),
    (9, 4, TransactionType.BUY, "300", "35.00"),
    (12, 5, TransactionType.BUY, "5", "3200.00"),
    (3, 1, TransactionType.SELL, "20", "1450.00"),
]


async def create_tables(drop_existing: bool = False) -> None:
    """Create the instruments, goals and trade_log tables (optionally dropping them first)."""
    async with engine.begin() as conn:
        if drop_existing:
            logger.info("Dropping existing tables")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables created")


async def seed_sample_data(db: AsyncSession) -> None:
    """Insert the sample instruments, goals and trade history."""
    async with transaction(db):
        instruments = [
            Instrument(symbol=symbol, name=name, type=kind, current_price=Decimal(price))
            for symbol, name, kind, price in SAMPLE_INSTRUMENTS
        ]
        goals = [
            Goal(name=name, target_amount=Decimal(target))
            for name, target in SAMPLE_GOALS
        ]
        db.add_all(instruments + goals)
        await db.flush()

        for instrument_no, goal_no, kind, quantity, price in SAMPLE_TRADES:
            quantity, price = Decimal(quantity), Decimal(price)
            db.add(TradeLog(
                instrument_id=instruments[instrument_no - 1].id,
                goal_id=goals[goal_no - 1].id,
                transaction_type=kind,
                quantity=quantity,
                price=price,
                total_amount=quantity * price
            ))

    logger.info(
        f"Seeded {len(SAMPLE_INSTRUMENTS)} instruments, {len(SAMPLE_GOALS)} goals "
        f"and {len(SAMPLE_TRADES)} trades"
    )
