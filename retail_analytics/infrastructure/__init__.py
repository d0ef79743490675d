"""
Infrastructure package for Retail Sales Analytics.

Centralizes I/O: PostgreSQL connectivity, the `retail_sales` repository, and
the CSV reader. Keep this layer free of analytics logic.
"""

from retail_analytics.infrastructure.csv_source import read_csv_rows
from retail_analytics.infrastructure.db_factory import (
    apply_statement_timeout,
    build_dsn,
    get_sync_connection,
)
from retail_analytics.infrastructure.repository import (
    create_schema,
    fetch_rows,
    load_csv,
    purge_incomplete_rows,
)

__all__ = [
    "apply_statement_timeout",
    "build_dsn",
    "create_schema",
    "fetch_rows",
    "get_sync_connection",
    "load_csv",
    "purge_incomplete_rows",
    "read_csv_rows",
]
