"""
Pytest configuration and shared fixtures for unit tests.

This module provides common fixtures for unit testing:
- A mock AsyncSession (no real database)
- A factory for mock SQLAlchemy results
- Sample instrument, goal and trade log objects
- FastAPI test client with dependency overrides cleared after each test

Database-backed tests are not included; repository SQL is exercised
against a real PostgreSQL instance via setup_database.py.
"""
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from broking_api.api.main import app
from broking_api.core.constants import InstrumentType, TransactionType


CREATED_AT = datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)


# ==================== FastAPI App & Client Fixtures ====================

@pytest.fixture
def test_app():
    """Get the FastAPI application instance, with overrides removed afterwards."""
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    """Synchronous test client for API endpoint testing."""
    with TestClient(test_app) as test_client:
        yield test_client


# ==================== Mock Database Fixtures ====================

@pytest.fixture
def mock_db_session():
    """Create a mock AsyncSession for database testing."""
    session = AsyncMock(spec=AsyncSession)
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.flush = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def make_result():
    """
    Factory for mock results of ``AsyncSession.execute``.

    Usage:
        mock_db_session.execute.side_effect = [
            make_result(scalar=instrument),   # scalar_one_or_none()
            make_result(count=3),             # scalar_one()
            make_result(rowcount=1),          # DELETE
        ]
    """
    def _make(scalar=None, count=None, first=None, rows=None, rowcount=None):
        result = MagicMock()
        result.scalar_one_or_none.return_value = scalar
        result.scalar_one.return_value = count
        result.first.return_value = first
        result.all.return_value = rows or []
        result.scalars.return_value.all.return_value = rows or []
        result.rowcount = rowcount
        return result
    return _make


# ==================== Sample Model Fixtures ====================

@pytest.fixture
def sample_instrument():
    """Create a sample instrument object."""
    return SimpleNamespace(
        id=1,
        symbol="XYZ",
        name="XYZ Corp",
        type=InstrumentType.STOCK,
        current_price=Decimal("100.0000"),
        created_at=CREATED_AT,
        updated_at=CREATED_AT
    )


@pytest.fixture
def sample_goal():
    """Create a sample goal object."""
    return SimpleNamespace(
        id=1,
        name="Retirement Fund",
        target_amount=Decimal("5000000.00"),
        created_at=CREATED_AT
    )


@pytest.fixture
def sample_trade_dict():
    """Sample trade log projection as returned by the trade log repository."""
    return {
        "id": 7,
        "instrument_id": 1,
        "goal_id": 1,
        "transaction_type": TransactionType.BUY,
        "quantity": Decimal("10.0000"),
        "price": Decimal("100.0000"),
        "total_amount": Decimal("1000.00"),
        "created_at": CREATED_AT,
        "instrument_symbol": "XYZ",
        "instrument_name": "XYZ Corp",
        "instrument_type": InstrumentType.STOCK,
        "goal_name": "Retirement Fund",
    }
