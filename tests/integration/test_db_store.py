"""
Integration tests for the PostgreSQL report store.

psycopg2.connect is mocked; these tests check the SQL the store issues and
how rows are mapped back to reports.
"""

import pytest
from decimal import Decimal

from shariah_registry import RatingRegistry, RiskScore, derive_identity
from shariah_registry.core.db import PostgresReportStore, table_name, check_connection
from shariah_registry.core.models import ProtocolReport, ShariahData, ComplianceStatus


IDENTITY = derive_identity(1, "0x" + "aa" * 20)


def _row(**overrides):
    row = {
        "name": "Gold Vault",
        "symbol": "GVLT",
        "chain_id": Decimal(1),
        "token_address": "0x" + "aa" * 20,
        "website": "https://gold.example",
        "scores": {"transparency": 90, "track_record": 85, "asset_backing": 70,
                   "smart_contract": 95, "liquidity": 60},
        "shariah": {"status": "COMPLIANT", "asset_type": "COMMODITY", "document_cid": "bafy",
                    "has_purification": False, "non_compliant_income_notes": ""},
        "overall_score": 81,
        "last_update": 1_700_000_000,
        "rater": "0x" + "22" * 20,
        "is_listed": True,
    }
    row.update(overrides)
    return row


class TestTableName:

    @pytest.mark.integration
    def test_schema_and_prefix(self):
        assert table_name("protocol_reports") == "shariah.sr_protocol_reports"


class TestPostgresReportStore:
    """Tests for PostgresReportStore against a mocked connection."""

    @pytest.mark.integration
    def test_ensure_schema_creates_table(self, mock_db_connect, mock_cursor):
        PostgresReportStore().ensure_schema()

        statements = [c.args[0] for c in mock_cursor.execute.call_args_list]
        assert any("CREATE SCHEMA IF NOT EXISTS" in s for s in statements)
        assert any("catalog_position BIGSERIAL" in s for s in statements)
        mock_db_connect.return_value.commit.assert_called_once()
        mock_db_connect.return_value.close.assert_called_once()

    @pytest.mark.integration
    def test_upsert_uses_on_conflict(self, mock_db_connect, mock_cursor):
        report = ProtocolReport.from_dict(_row())
        PostgresReportStore().upsert(IDENTITY, report, is_new=True)

        query, params = mock_cursor.execute.call_args.args
        assert "ON CONFLICT (identity) DO UPDATE" in query
        assert "catalog_position = EXCLUDED" not in query
        assert params[1:6] == ("Gold Vault", "GVLT", 1, "0x" + "aa" * 20, "https://gold.example")
        assert params[6].adapted == report.scores.to_dict()
        assert params[7].adapted["status"] == "COMPLIANT"
        assert params[8:] == (81, 1_700_000_000, "0x" + "22" * 20, True)
        mock_db_connect.return_value.commit.assert_called_once()

    @pytest.mark.integration
    def test_get_maps_row_to_report(self, mock_db_connect, mock_cursor):
        mock_cursor.fetchone.return_value = _row()

        report = PostgresReportStore().get(IDENTITY)

        assert report.chain_id == 1
        assert report.scores == RiskScore(90, 85, 70, 95, 60)
        assert report.shariah.status is ComplianceStatus.COMPLIANT
        assert report.is_listed

    @pytest.mark.integration
    def test_get_missing_returns_none(self, mock_db_connect, mock_cursor):
        mock_cursor.fetchone.return_value = None
        assert PostgresReportStore().get(IDENTITY) is None

    @pytest.mark.integration
    def test_catalog_slice_orders_by_position(self, mock_db_connect, mock_cursor):
        mock_cursor.fetchall.return_value = [(memoryview(IDENTITY),), (b"\x02" * 32,)]

        result = PostgresReportStore().catalog_slice(3, 2)

        query, params = mock_cursor.execute.call_args.args
        assert "ORDER BY catalog_position" in query
        assert params == (3, 2)
        assert result == [IDENTITY, b"\x02" * 32]

    @pytest.mark.integration
    def test_catalog_length(self, mock_db_connect, mock_cursor):
        mock_cursor.fetchone.return_value = (7,)
        assert PostgresReportStore().catalog_length() == 7

    @pytest.mark.integration
    def test_exists(self, mock_db_connect, mock_cursor):
        mock_cursor.fetchone.return_value = (1,)
        assert PostgresReportStore().exists(IDENTITY) is True
        mock_cursor.fetchone.return_value = None
        assert PostgresReportStore().exists(IDENTITY) is False

    @pytest.mark.integration
    def test_registry_write_path_over_postgres(self, mock_db_connect, mock_cursor, roles, rater, rating_factory):
        """A first submission checks existence, then upserts."""
        mock_cursor.fetchone.return_value = None
        registry = RatingRegistry(roles, store=PostgresReportStore(), clock=lambda: 1_700_000_000)

        registry.submit_rating(rater, **rating_factory(shariah=ShariahData()))

        queries = [c.args[0] for c in mock_cursor.execute.call_args_list]
        assert queries[0].strip().startswith("SELECT 1")
        assert "INSERT INTO shariah.sr_protocol_reports" in queries[1]

    @pytest.mark.integration
    def test_get_many_is_one_query(self, mock_db_connect, mock_cursor):
        other = derive_identity(1, "0x" + "bb" * 20)
        mock_cursor.fetchall.return_value = [dict(_row(), identity=memoryview(IDENTITY))]

        result = PostgresReportStore().get_many([IDENTITY, other])

        assert mock_cursor.execute.call_count == 1
        query, params = mock_cursor.execute.call_args.args
        assert "identity = ANY(%s)" in query
        assert len(params[0]) == 2
        assert list(result) == [IDENTITY]
        assert result[IDENTITY].symbol == "GVLT"

    @pytest.mark.integration
    def test_get_many_empty_skips_database(self, mock_db_connect, mock_cursor):
        assert PostgresReportStore().get_many([]) == {}
        mock_db_connect.assert_not_called()

    @pytest.mark.integration
    def test_list_reports_batches_record_lookups(self, mock_db_connect, mock_cursor, roles):
        """A page costs count + slice + one batch fetch, whatever its size."""
        other = derive_identity(1, "0x" + "bb" * 20)
        mock_cursor.fetchone.return_value = (2,)
        mock_cursor.fetchall.side_effect = [
            [(memoryview(other),), (memoryview(IDENTITY),)],
            [dict(_row(), identity=memoryview(IDENTITY)),
             dict(_row(symbol="OTHR"), identity=memoryview(other))],
        ]
        registry = RatingRegistry(roles, store=PostgresReportStore())

        reports = registry.list_reports(0, 10)

        assert [r.symbol for r in reports] == ["OTHR", "GVLT"]
        assert mock_cursor.execute.call_count == 3


class TestCheckConnection:

    @pytest.mark.integration
    def test_connection_ok(self, mock_db_connect, mock_cursor):
        assert check_connection() is True

    @pytest.mark.integration
    def test_connection_failure(self, capsys):
        import psycopg2
        from unittest.mock import patch

        with patch("psycopg2.connect", side_effect=psycopg2.OperationalError("refused")):
            assert check_connection() is False
        assert "Database connection failed" in capsys.readouterr().out
