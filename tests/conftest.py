"""
Pytest configuration for Retail Sales Analytics.

Provides fixtures for:
- Raw sale rows with known aggregate answers
- Settings isolation between tests
- Database connection management for integration tests
"""

from __future__ import annotations

import os
from typing import Any, Callable, Dict, Generator, List

import psycopg
import pytest

from retail_analytics.config import Settings, get_settings

RowFactory = Callable[..., Dict[str, Any]]


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """Make every test see settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_row() -> RowFactory:
    """
    Factory for complete raw rows keyed by canonical field names.

    Keyword overrides replace individual values; pass None or "" to blank one.
    """

    def _make(transaction_id: int, **overrides: Any) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "transaction_id": transaction_id,
            "sale_date": "2022-11-05",
            "sale_time": "10:15:00",
            "customer_id": 1,
            "gender": "Female",
            "age": 30,
            "category": "Beauty",
            "quantity": 1,
            "price_per_unit": "50",
            "cogs": "12.50",
            "total_sale": "50",
        }
        row.update(overrides)
        return row

    return _make


@pytest.fixture
def sample_rows(make_row: RowFactory) -> List[Dict[str, Any]]:
    """
    Six valid rows across two years plus three invalid ones.

    Valid totals: Beauty 1000 (2 orders), Clothing 500 (2), Electronics 1550 (2).
    """
    return [
        make_row(1, sale_date="2022-01-10", sale_time="09:00:00", customer_id=1,
                 gender="Female", age=25, category="Beauty", quantity=2, total_sale="100"),
        make_row(2, sale_date="2022-01-20", sale_time="13:00:00", customer_id=2,
                 gender="Male", age=40, category="Clothing", quantity=4, total_sale="200"),
        make_row(3, sale_date="2022-02-05", sale_time="17:00:00", customer_id=1,
                 gender="Female", age=25, category="Clothing", quantity=1, total_sale="300"),
        make_row(4, sale_date="2022-02-06", sale_time="18:30:00", customer_id=3,
                 gender="Male", age=50, category="Electronics", quantity=4, total_sale="1500"),
        make_row(5, sale_date="2023-03-01", sale_time="11:59:00", customer_id=2,
                 gender="Male", age=40, category="Beauty", quantity=3, total_sale="900"),
        make_row(6, sale_date="2023-04-01", sale_time="12:00:00", customer_id=None,
                 gender="Female", age=None, category="Electronics", quantity=1, total_sale="50"),
        # Invalid: blank category, malformed date, missing gender
        make_row(7, category="", total_sale="9999"),
        make_row(8, sale_date="2022-13-40", total_sale="9999"),
        make_row(9, gender=None, total_sale="9999"),
    ]


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture with test-specific overrides.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "retail_analytics"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return (
        f"postgresql://{test_settings.db_user}:{test_settings.db_password}"
        f"@{test_settings.db_host}:{test_settings.db_port}/{test_settings.db_name}"
    )


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture(scope="session")
def db_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a session-scoped database connection for integration tests.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        yield conn
    finally:
        conn.close()
