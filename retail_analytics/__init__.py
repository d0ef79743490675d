"""
Retail Sales Analytics - descriptive analytics over the `retail_sales` table.

This package loads a snapshot of sale transactions (from PostgreSQL or a CSV
export), filters out incomplete rows, and answers the usual questions asked of
such a table:

- Net sales and order counts per category
- Best selling month of each year
- Top customers by spend
- Unique customers per category
- Orders per time-of-day shift

Results are plain in-memory structures; the orchestrator, reporter, and CLI
turn them into JSON artifacts and console tables.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from retail_analytics.analytics import (
    SalesAnalytics,
    best_month_per_year,
    category_totals,
    classify_shift,
    shift_counts,
    top_customers,
    unique_customers_per_category,
)
from retail_analytics.config import Settings, get_settings
from retail_analytics.domain import SaleRecord, Shift, parse_record, valid_records
from retail_analytics.exceptions import InvalidArgument, RetailAnalyticsError
from retail_analytics.orchestrator import ReportConfig, available_sections, run_report
from retail_analytics.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "SaleRecord",
    "Shift",
    "parse_record",
    "valid_records",
    # Analytics
    "SalesAnalytics",
    "best_month_per_year",
    "category_totals",
    "classify_shift",
    "shift_counts",
    "top_customers",
    "unique_customers_per_category",
    # Orchestration
    "ReportConfig",
    "available_sections",
    "run_report",
    # Errors
    "InvalidArgument",
    "RetailAnalyticsError",
    # Logging
    "configure_logging",
    "get_logger",
]
