"""
Data access for the `retail_sales` table.

Covers the table lifecycle the analytics layer relies on: creating the
schema, bulk-loading CSV exports with COPY, purging rows that are missing
required values, and fetching rows as plain dictionaries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from psycopg import Connection
from psycopg import sql as pgsql
from psycopg.rows import dict_row

from retail_analytics.exceptions import InvalidArgument
from retail_analytics.utils.logging import get_logger

log = get_logger(__name__)

TABLE_NAME = "retail_sales"

COLUMNS = (
    "transactions_id",
    "sale_date",
    "sale_time",
    "customer_id",
    "gender",
    "age",
    "category",
    "quantiy",
    "price_per_unit",
    "cogs",
    "total_sale",
)

# Columns whose NULL makes a row unusable for analysis.
REQUIRED_COLUMNS = (
    "transactions_id",
    "sale_date",
    "sale_time",
    "gender",
    "category",
    "quantiy",
    "cogs",
    "total_sale",
)

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS {table} (
    transactions_id INT PRIMARY KEY,
    sale_date       DATE,
    sale_time       TIME,
    customer_id     INT,
    gender          VARCHAR(15),
    age             INT,
    category        VARCHAR(15),
    quantiy         INT,
    price_per_unit  FLOAT,
    cogs            FLOAT,
    total_sale      FLOAT
)
"""


def _table(table: str) -> pgsql.Identifier:
    return pgsql.Identifier(table)


def create_schema(conn: Connection, table: str = TABLE_NAME) -> None:
    """Create the sales table if it does not exist yet."""
    with conn.cursor() as cur:
        cur.execute(pgsql.SQL(CREATE_TABLE_SQL).format(table=_table(table)))
    conn.commit()
    log.info("Schema ensured", extra={"table": table})


def purge_incomplete_rows(conn: Connection, table: str = TABLE_NAME) -> int:
    """
    Delete rows with a NULL in any required column.

    Returns the number of deleted rows.
    """
    predicate = pgsql.SQL(" OR ").join(
        pgsql.SQL("{} IS NULL").format(pgsql.Identifier(column)) for column in REQUIRED_COLUMNS
    )
    with conn.cursor() as cur:
        cur.execute(
            pgsql.SQL("DELETE FROM {table} WHERE {predicate}").format(
                table=_table(table), predicate=predicate
            )
        )
        deleted = cur.rowcount
    conn.commit()
    log.info("Incomplete rows purged", extra={"table": table, "deleted": deleted})
    return deleted


def load_csv(conn: Connection, csv_path: Path | str, table: str = TABLE_NAME) -> int:
    """
    Bulk-load a CSV export (with header row) into the sales table via COPY.

    Empty fields are loaded as NULL. Returns the number of rows copied.
    """
    path = Path(csv_path)
    statement = pgsql.SQL(
        "COPY {table} ({columns}) FROM STDIN WITH (FORMAT csv, HEADER TRUE)"
    ).format(
        table=_table(table),
        columns=pgsql.SQL(", ").join(pgsql.Identifier(column) for column in COLUMNS),
    )
    with conn.cursor() as cur:
        with cur.copy(statement) as copy:
            with path.open("r", encoding="utf-8") as f:
                for line in f:
                    copy.write(line)
        copied = cur.rowcount
    conn.commit()
    log.info("CSV loaded", extra={"table": table, "path": str(path), "rows": copied})
    return copied


def fetch_rows(
    conn: Connection, limit: Optional[int] = None, table: str = TABLE_NAME
) -> List[Dict[str, Any]]:
    """
    Fetch rows as dictionaries keyed by column name, ordered by transaction id.

    Raises
    ------
    InvalidArgument
        If `limit` is negative.
    """
    if limit is not None and limit < 0:
        raise InvalidArgument(f"limit must be non-negative, got {limit!r}")
    query = pgsql.SQL("SELECT {columns} FROM {table} ORDER BY transactions_id").format(
        columns=pgsql.SQL(", ").join(pgsql.Identifier(column) for column in COLUMNS),
        table=_table(table),
    )
    params: tuple = ()
    if limit is not None:
        query = query + pgsql.SQL(" LIMIT %s")
        params = (limit,)

    with conn.cursor(row_factory=dict_row) as cur:
        cur.execute(query, params)
        rows = cur.fetchall()
    log.info("Rows fetched", extra={"table": table, "rows": len(rows)})
    return rows


__all__ = [
    "COLUMNS",
    "CREATE_TABLE_SQL",
    "REQUIRED_COLUMNS",
    "TABLE_NAME",
    "create_schema",
    "fetch_rows",
    "load_csv",
    "purge_incomplete_rows",
]
