"""
Database connection factory for Retail Sales Analytics.

Every CLI command opens one short-lived synchronous PostgreSQL connection, so
there is no pool to manage. Connecting retries transient failures with
tenacity.
"""

from __future__ import annotations

from typing import Optional

import psycopg
from psycopg import Connection, Cursor
from psycopg import sql as pgsql
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from retail_analytics.config import Settings, get_settings


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def get_sync_connection(dsn_override: Optional[str] = None) -> Connection:
    """
    Acquire a dedicated synchronous connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Parameters
    ----------
    dsn_override : str, optional
        Connect to this DSN instead of the one composed from settings.

    Returns
    -------
    Connection
        A new psycopg connection instance.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn_override or build_dsn())


def apply_statement_timeout(cur: Cursor, timeout_ms: int) -> None:
    """Bound every following statement on this session; 0 disables the limit."""
    cur.execute(
        pgsql.SQL("SET statement_timeout = {}").format(pgsql.Literal(max(int(timeout_ms), 0)))
    )


__all__ = [
    "apply_statement_timeout",
    "build_dsn",
    "get_sync_connection",
]
