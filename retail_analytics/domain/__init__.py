"""
Domain package for Retail Sales Analytics.

Exports the sale record, the result models, and the validation helpers that
turn raw rows into a snapshot of valid records.
"""

from retail_analytics.domain.models import (
    CategoryTotal,
    CustomerSpend,
    GenderCount,
    MonthlyAverage,
    SaleRecord,
    Shift,
)
from retail_analytics.domain.validation import RecordLike, parse_record, valid_records

__all__ = [
    "CategoryTotal",
    "CustomerSpend",
    "GenderCount",
    "MonthlyAverage",
    "RecordLike",
    "SaleRecord",
    "Shift",
    "parse_record",
    "valid_records",
]
