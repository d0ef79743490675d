"""
Analytics package for Retail Sales Analytics.

Re-exports the core aggregates and the ad-hoc queries so callers can import
from `retail_analytics.analytics` directly.
"""

from retail_analytics.analytics.queries import (
    average_customer_age,
    category_sales_in_month,
    high_value_transactions,
    sales_on_date,
    transactions_by_gender,
)
from retail_analytics.analytics.sales import (
    DEFAULT_TOP_N,
    SalesAnalytics,
    best_month_per_year,
    category_totals,
    classify_shift,
    shift_counts,
    top_customers,
    unique_customers_per_category,
)

__all__ = [
    # Core aggregates
    "DEFAULT_TOP_N",
    "SalesAnalytics",
    "best_month_per_year",
    "category_totals",
    "classify_shift",
    "shift_counts",
    "top_customers",
    "unique_customers_per_category",
    # Ad-hoc queries
    "average_customer_age",
    "category_sales_in_month",
    "high_value_transactions",
    "sales_on_date",
    "transactions_by_gender",
]
