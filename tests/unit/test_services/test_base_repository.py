"""Unit tests for the shared repository queries of instruments and goals."""
from datetime import datetime, timezone

import pytest
from sqlalchemy import update

from broking_api.db.models.instrument import Instrument
from broking_api.repositories.goal_repository import GoalRepository
from broking_api.repositories.instrument_repository import InstrumentRepository


def executed_sql(mock_db_session) -> str:
    return str(mock_db_session.execute.await_args.args[0])


class TestListOrdering:
    """list-all returns the most recently created rows first."""

    @pytest.mark.unit
    async def test_instruments_newest_first(self, mock_db_session, make_result, sample_instrument):
        mock_db_session.execute.return_value = make_result(rows=[sample_instrument])

        instruments = await InstrumentRepository(mock_db_session).get_all()

        assert instruments == [sample_instrument]
        assert executed_sql(mock_db_session).endswith(
            "ORDER BY instruments.created_at DESC, instruments.id DESC"
        )

    @pytest.mark.unit
    async def test_goals_newest_first(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(rows=[])

        await GoalRepository(mock_db_session).get_all()

        assert executed_sql(mock_db_session).endswith(
            "ORDER BY goals.created_at DESC, goals.id DESC"
        )

    @pytest.mark.unit
    async def test_filters_come_before_ordering(self, mock_db_session, make_result):
        mock_db_session.execute.return_value = make_result(rows=[])

        await InstrumentRepository(mock_db_session).get_all({"symbol": "XYZ", "unknown": 1})

        sql = executed_sql(mock_db_session)
        assert "WHERE instruments.symbol = :symbol_1" in sql
        assert "unknown" not in sql
        assert sql.endswith("ORDER BY instruments.created_at DESC, instruments.id DESC")


class TestInstrumentUpdatedAt:

    @pytest.mark.unit
    def test_every_update_stamps_updated_at(self):
        """UPDATE statements on instruments set updated_at even when it is not supplied."""
        sql = str(update(Instrument).where(Instrument.id == 1).values(current_price=1))

        assert "updated_at=" in sql

    @pytest.mark.unit
    def test_stamp_is_current_utc_time(self):
        before = datetime.now(timezone.utc)

        stamped = Instrument.__table__.c.updated_at.onupdate.arg(None)

        assert stamped.tzinfo is not None
        assert stamped >= before
