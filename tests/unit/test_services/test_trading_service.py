"""
Unit tests for TradingService.

Tests cover:
- Recording BUY and SELL trades with an exact total amount
- Quantity/price validation
- Instrument and goal reference checks
- Rollback on store failures (no partial trade log entry)
"""
import pytest
from decimal import Decimal
from types import SimpleNamespace
from sqlalchemy.exc import SQLAlchemyError

from broking_api.core.constants import LedgerMessages, TransactionType
from broking_api.db.models.trade_log import TradeLog
from broking_api.services.result_objects import ErrorCode
from broking_api.services.trading_service import TradingService, validate_trade


@pytest.fixture
def trading_service(mock_db_session):
    """Create a TradingService with a mocked session."""
    async def assign_id(obj):
        obj.id = 7
    mock_db_session.refresh.side_effect = assign_id
    return TradingService(mock_db_session)


def added_trade(mock_db_session) -> TradeLog:
    """The TradeLog instance handed to session.add."""
    return mock_db_session.add.call_args[0][0]


def detail_row(sample_trade_dict):
    trade = SimpleNamespace(**{
        key: sample_trade_dict[key]
        for key in ("id", "instrument_id", "goal_id", "transaction_type", "quantity",
                "price", "total_amount", "created_at")
    })
    return (
        trade,
        sample_trade_dict["instrument_symbol"],
        sample_trade_dict["instrument_name"],
        sample_trade_dict["instrument_type"],
        sample_trade_dict["goal_name"],
    )


class TestValidateTrade:
    """Test quantity and price validation."""

    @pytest.mark.unit
    @pytest.mark.parametrize("quantity,price", [
        (None, Decimal("10")),
        (Decimal("5"), None),
        (Decimal("0"), Decimal("10")),
        (Decimal("5"), Decimal("0")),
    ])
    def test_missing_or_zero_values_are_required(self, quantity, price):
        assert validate_trade(quantity, price) == LedgerMessages.TRADE_FIELDS_REQUIRED

    @pytest.mark.unit
    @pytest.mark.parametrize("quantity,price", [
        (Decimal("-1"), Decimal("10")),
        (Decimal("5"), Decimal("-0.01")),
    ])
    def test_negative_values_rejected(self, quantity, price):
        assert validate_trade(quantity, price) == LedgerMessages.TRADE_NOT_POSITIVE

    @pytest.mark.unit
    def test_positive_values_accepted(self):
        assert validate_trade(Decimal("0.5"), Decimal("0.02")) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("quantity,price", [
        (Decimal("0.00001"), Decimal("1")),
        (Decimal("0.00004"), Decimal("1000")),
        (Decimal("10"), Decimal("0.00004")),
    ])
    def test_values_stored_as_zero_rejected(self, quantity, price):
        """quantity and price are NUMERIC(.., 4); anything below 0.00005 is stored as 0."""
        assert validate_trade(quantity, price) == LedgerMessages.TRADE_NOT_POSITIVE

    @pytest.mark.unit
    def test_smallest_stored_quantity_accepted(self):
        assert validate_trade(Decimal("0.00005"), Decimal("100")) is None

    @pytest.mark.unit
    @pytest.mark.parametrize("quantity,price", [
        (Decimal("0.0001"), Decimal("0.0001")),
        (Decimal("0.001"), Decimal("4.99")),
    ])
    def test_total_stored_as_zero_rejected(self, quantity, price):
        """total_amount is NUMERIC(15,2); a product below 0.005 would be stored as 0.00."""
        assert validate_trade(quantity, price) == LedgerMessages.TRADE_TOTAL_NOT_POSITIVE


class TestExecuteTrade:
    """Test the buy/sell operation against a mocked session."""

    @pytest.mark.unit
    async def test_buy_records_exact_total(
        self, trading_service, mock_db_session, make_result,
        sample_instrument, sample_trade_dict
    ):
        """A BUY inserts one entry whose total is quantity x price."""
        sample_trade_dict["goal_id"] = None
        sample_trade_dict["goal_name"] = None
        mock_db_session.execute.side_effect = [
            make_result(scalar=sample_instrument),
            make_result(first=detail_row(sample_trade_dict)),
        ]

        result = await trading_service.buy_async(1, Decimal("10"), Decimal("100.00"))

        assert result.success is True
        assert result.error_code == ErrorCode.NONE
        entry = added_trade(mock_db_session)
        assert entry.transaction_type == TransactionType.BUY
        assert entry.instrument_id == 1
        assert entry.goal_id is None
        assert entry.total_amount == Decimal("1000.00")
        assert result.trade["id"] == 7
        assert result.trade["instrument_symbol"] == "XYZ"
        assert result.trade["goal_name"] is None
        mock_db_session.commit.assert_awaited_once()
        mock_db_session.rollback.assert_not_awaited()

    @pytest.mark.unit
    async def test_total_is_not_float_rounded(
        self, trading_service, mock_db_session, make_result,
        sample_instrument, sample_trade_dict
    ):
        mock_db_session.execute.side_effect = [
            make_result(scalar=sample_instrument),
            make_result(first=detail_row(sample_trade_dict)),
        ]

        await trading_service.buy_async(1, Decimal("0.1"), Decimal("0.2"))

        assert added_trade(mock_db_session).total_amount == Decimal("0.02")

    @pytest.mark.unit
    async def test_sell_is_never_checked_against_holdings(
        self, trading_service, mock_db_session, make_result,
        sample_instrument, sample_trade_dict
    ):
        """Selling far more than was ever bought is still recorded."""
        sample_trade_dict["transaction_type"] = TransactionType.SELL
        mock_db_session.execute.side_effect = [
            make_result(scalar=sample_instrument),
            make_result(first=detail_row(sample_trade_dict)),
        ]

        result = await trading_service.sell_async(1, Decimal("1000000"), Decimal("2.5"))

        assert result.success is True
        entry = added_trade(mock_db_session)
        assert entry.transaction_type == TransactionType.SELL
        assert entry.total_amount == Decimal("2500000.0")
        # instrument lookup and re-read only; no position query
        assert mock_db_session.execute.await_count == 2

    @pytest.mark.unit
    async def test_goal_is_resolved_when_given(
        self, trading_service, mock_db_session, make_result,
        sample_instrument, sample_goal, sample_trade_dict
    ):
        mock_db_session.execute.side_effect = [
            make_result(scalar=sample_instrument),
            make_result(scalar=sample_goal),
            make_result(first=detail_row(sample_trade_dict)),
        ]

        result = await trading_service.buy_async(
            1, Decimal("10"), Decimal("100"), goal_id=1
        )

        assert result.success is True
        assert added_trade(mock_db_session).goal_id == 1
        assert result.trade["goal_name"] == "Retirement Fund"

    @pytest.mark.unit
    @pytest.mark.parametrize("quantity,price,message", [
        (Decimal("0"), Decimal("100"), LedgerMessages.TRADE_FIELDS_REQUIRED),
        (Decimal("-5"), Decimal("100"), LedgerMessages.TRADE_NOT_POSITIVE),
        (Decimal("5"), Decimal("-100"), LedgerMessages.TRADE_NOT_POSITIVE),
        (Decimal("0.00001"), Decimal("1"), LedgerMessages.TRADE_NOT_POSITIVE),
        (Decimal("0.0001"), Decimal("0.0001"), LedgerMessages.TRADE_TOTAL_NOT_POSITIVE),
    ])
    async def test_invalid_values_create_nothing(
        self, trading_service, mock_db_session, quantity, price, message
    ):
        result = await trading_service.buy_async(1, quantity, price)

        assert result.success is False
        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert result.message == message
        mock_db_session.execute.assert_not_awaited()
        mock_db_session.add.assert_not_called()

    @pytest.mark.unit
    async def test_unknown_instrument_is_not_found(
        self, trading_service, mock_db_session, make_result
    ):
        mock_db_session.execute.side_effect = [make_result(scalar=None)]

        result = await trading_service.sell_async(999, Decimal("1"), Decimal("1"))

        assert result.success is False
        assert result.error_code == ErrorCode.NOT_FOUND
        assert result.message == LedgerMessages.INSTRUMENT_NOT_FOUND
        mock_db_session.add.assert_not_called()

    @pytest.mark.unit
    async def test_unknown_goal_is_a_validation_error(
        self, trading_service, mock_db_session, make_result, sample_instrument
    ):
        mock_db_session.execute.side_effect = [
            make_result(scalar=sample_instrument),
            make_result(scalar=None),
        ]

        result = await trading_service.buy_async(
            1, Decimal("1"), Decimal("1"), goal_id=42
        )

        assert result.success is False
        assert result.error_code == ErrorCode.VALIDATION_ERROR
        assert result.message == LedgerMessages.GOAL_NOT_FOUND
        mock_db_session.add.assert_not_called()

    @pytest.mark.unit
    async def test_store_failure_rolls_back(
        self, trading_service, mock_db_session, make_result, sample_instrument
    ):
        """A failure after the insert leaves no entry behind."""
        mock_db_session.execute.side_effect = [
            make_result(scalar=sample_instrument),
            SQLAlchemyError("connection lost"),
        ]

        result = await trading_service.buy_async(1, Decimal("1"), Decimal("1"))

        assert result.success is False
        assert result.error_code == ErrorCode.STORE_ERROR
        assert result.message == "connection lost"
        mock_db_session.rollback.assert_awaited_once()
        mock_db_session.commit.assert_not_awaited()
