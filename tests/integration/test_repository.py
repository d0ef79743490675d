"""
Integration tests for the `retail_sales` repository.

These tests run against a real PostgreSQL instance and verify that:
1. The schema can be created idempotently
2. CSV exports load via COPY
3. Incomplete rows are purged, leaving only rows the analytics layer accepts

Run with: RUN_INTEGRATION_TESTS=1 pytest tests/integration/
"""

from __future__ import annotations

import os
from pathlib import Path

import psycopg
import pytest
from psycopg import sql as pgsql

from retail_analytics.analytics.sales import category_totals
from retail_analytics.domain.validation import valid_records
from retail_analytics.infrastructure.csv_source import read_csv_rows
from retail_analytics.infrastructure.repository import (
    create_schema,
    fetch_rows,
    load_csv,
    purge_incomplete_rows,
)
from scripts.generate_data import _generate_rows_csv

TEST_TABLE = "retail_sales_it"
SEEDED_ROWS = 200
SEED = 11

pytestmark = pytest.mark.skipif(
    os.getenv("RUN_INTEGRATION_TESTS", "0") != "1",
    reason="Integration tests require RUN_INTEGRATION_TESTS=1 and reachable Postgres",
)


def _drop_table(conn: psycopg.Connection) -> None:
    with conn.cursor() as cur:
        cur.execute(pgsql.SQL("DROP TABLE IF EXISTS {}").format(pgsql.Identifier(TEST_TABLE)))
    conn.commit()


@pytest.fixture
def seeded_table(db_connection: psycopg.Connection, tmp_path: Path):
    """Create a scratch sales table seeded from a generated CSV; drop it afterwards."""
    csv_path = tmp_path / "retail_sales.csv"
    _generate_rows_csv(csv_path, rows=SEEDED_ROWS, batch_size=50, seed=SEED, incomplete_ratio=0.1)

    _drop_table(db_connection)
    create_schema(db_connection, table=TEST_TABLE)
    load_csv(db_connection, csv_path, table=TEST_TABLE)
    yield csv_path
    _drop_table(db_connection)


def test_create_schema_is_idempotent(db_connection: psycopg.Connection, seeded_table: Path):
    create_schema(db_connection, table=TEST_TABLE)

    assert len(fetch_rows(db_connection, table=TEST_TABLE)) == SEEDED_ROWS


def test_fetch_rows_respects_limit(db_connection: psycopg.Connection, seeded_table: Path):
    rows = fetch_rows(db_connection, limit=10, table=TEST_TABLE)

    assert [row["transactions_id"] for row in rows] == list(range(1, 11))


def test_purge_leaves_only_valid_rows(db_connection: psycopg.Connection, seeded_table: Path):
    expected_valid = len(valid_records(read_csv_rows(seeded_table)))

    deleted = purge_incomplete_rows(db_connection, table=TEST_TABLE)
    remaining = fetch_rows(db_connection, table=TEST_TABLE)

    assert deleted == SEEDED_ROWS - expected_valid
    assert len(remaining) == expected_valid
    assert len(valid_records(remaining)) == expected_valid


def test_database_and_csv_snapshots_agree(db_connection: psycopg.Connection, seeded_table: Path):
    from_db = category_totals(fetch_rows(db_connection, table=TEST_TABLE))
    from_csv = category_totals(read_csv_rows(seeded_table))

    assert {k: v.order_count for k, v in from_db.items()} == {
        k: v.order_count for k, v in from_csv.items()
    }
