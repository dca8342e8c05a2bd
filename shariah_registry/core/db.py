"""
PostgreSQL report store.

Persists the keyed records and the catalog in one table. The catalog order is
the `catalog_position` sequence value assigned when a row is first inserted;
updates go through ON CONFLICT and never touch it.
"""

import psycopg2
from psycopg2.extras import RealDictCursor, Json
from contextlib import contextmanager
from typing import List, Dict, Optional

from ..config.settings import DB_CONFIG, SCHEMA_NAME, TABLE_PREFIX
from .models import ProtocolReport


def table_name(name: str) -> str:
    """Get full table name with schema and prefix."""
    return f"{SCHEMA_NAME}.{TABLE_PREFIX}{name}"


@contextmanager
def get_connection(db_config: Dict = None):
    """
    Get a database connection as a context manager.

    Usage:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
    """
    conn = None
    try:
        conn = psycopg2.connect(**(db_config or DB_CONFIG))
        yield conn
    finally:
        if conn:
            conn.close()


REPORT_COLUMNS = (
    "name", "symbol", "chain_id", "token_address", "website", "scores",
    "shariah", "overall_score", "last_update", "rater", "is_listed",
)


def _row_to_report(row: Dict) -> ProtocolReport:
    return ProtocolReport.from_dict({column: row[column] for column in REPORT_COLUMNS})


class PostgresReportStore:
    """Keyed store plus catalog backed by PostgreSQL."""

    def __init__(self, db_config: Dict = None):
        self.db_config = db_config or DB_CONFIG
        self.table = table_name("protocol_reports")

    def ensure_schema(self) -> None:
        """Create the schema and reports table if they do not exist."""
        statements = [
            f"CREATE SCHEMA IF NOT EXISTS {SCHEMA_NAME}",
            f"""
            CREATE TABLE IF NOT EXISTS {self.table} (
                catalog_position BIGSERIAL UNIQUE,
                identity BYTEA PRIMARY KEY,
                name TEXT NOT NULL,
                symbol TEXT NOT NULL,
                chain_id NUMERIC(78, 0) NOT NULL,
                token_address TEXT NOT NULL,
                website TEXT NOT NULL,
                scores JSONB NOT NULL,
                shariah JSONB NOT NULL,
                overall_score INTEGER NOT NULL,
                last_update BIGINT NOT NULL,
                rater TEXT NOT NULL,
                is_listed BOOLEAN NOT NULL DEFAULT true
            )
            """,
        ]
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                for statement in statements:
                    cur.execute(statement)
                conn.commit()

    def get(self, identity: bytes) -> Optional[ProtocolReport]:
        query = f"""
            SELECT {', '.join(REPORT_COLUMNS)}
            FROM {self.table}
            WHERE identity = %s
        """
        with get_connection(self.db_config) as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, (psycopg2.Binary(bytes(identity)),))
                row = cur.fetchone()
        return _row_to_report(dict(row)) if row else None

    def get_many(self, identities: List[bytes]) -> Dict[bytes, ProtocolReport]:
        """Fetch several reports in one round trip; missing ones are omitted."""
        if not identities:
            return {}
        query = f"""
            SELECT identity, {', '.join(REPORT_COLUMNS)}
            FROM {self.table}
            WHERE identity = ANY(%s)
        """
        params = ([psycopg2.Binary(bytes(i)) for i in identities],)
        with get_connection(self.db_config) as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
        reports = {}
        for row in rows:
            row = dict(row)
            identity = bytes(row.pop("identity"))
            reports[identity] = _row_to_report(row)
        return reports

    def exists(self, identity: bytes) -> bool:
        query = f"SELECT 1 FROM {self.table} WHERE identity = %s"
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, (psycopg2.Binary(bytes(identity)),))
                return cur.fetchone() is not None

    def upsert(self, identity: bytes, report: ProtocolReport, is_new: bool) -> None:
        """
        Insert or replace a record in a single statement.

        `is_new` is informational here; ON CONFLICT decides whether a
        catalog position is assigned.
        """
        query = f"""
            INSERT INTO {self.table}
            (identity, {', '.join(REPORT_COLUMNS)})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            ON CONFLICT (identity) DO UPDATE SET
                {', '.join(f'{c} = EXCLUDED.{c}' for c in REPORT_COLUMNS)}
        """
        params = (
            psycopg2.Binary(bytes(identity)),
            report.name,
            report.symbol,
            report.chain_id,
            report.token_address,
            report.website,
            Json(report.scores.to_dict()),
            Json(report.shariah.to_dict()),
            report.overall_score,
            report.last_update,
            report.rater,
            report.is_listed,
        )
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                conn.commit()

    def catalog_slice(self, offset: int, limit: int) -> List[bytes]:
        query = f"""
            SELECT identity FROM {self.table}
            ORDER BY catalog_position
            OFFSET %s LIMIT %s
        """
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(query, (offset, limit))
                return [bytes(row[0]) for row in cur.fetchall()]

    def catalog_length(self) -> int:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT COUNT(*) FROM {self.table}")
                return int(cur.fetchone()[0])


def check_connection(db_config: Dict = None) -> bool:
    """
    Test database connectivity.

    Returns:
        True if connection successful
    """
    try:
        with get_connection(db_config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1")
                return True
    except psycopg2.Error as e:
        print(f"Database connection failed: {e}")
        return False
