"""
Ad-hoc filters and lookups over the sales snapshot.

These are the day-to-day questions asked of `retail_sales`: what sold on a
given day, which large orders a category saw in a month, who buys what.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional, Union

from retail_analytics.domain.models import GenderCount, SaleRecord
from retail_analytics.domain.validation import RecordLike, valid_records
from retail_analytics.exceptions import InvalidArgument

_CENTS = Decimal("0.01")


def _by_transaction(records: Iterable[SaleRecord]) -> List[SaleRecord]:
    return sorted(records, key=lambda record: record.transaction_id)


def sales_on_date(records: Iterable[RecordLike], day: date) -> List[SaleRecord]:
    """All sales made on `day`, ordered by transaction id."""
    return _by_transaction(r for r in valid_records(records) if r.sale_date == day)


def category_sales_in_month(
    records: Iterable[RecordLike],
    category: str,
    year: int,
    month: int,
    min_quantity: int = 4,
) -> List[SaleRecord]:
    """
    Sales of `category` during the given month with at least `min_quantity` units.

    Category matching is exact, as in the source table.
    """
    if not 1 <= month <= 12:
        raise InvalidArgument(f"month must be between 1 and 12, got {month!r}")
    return _by_transaction(
        r
        for r in valid_records(records)
        if r.category == category
        and r.sale_date.year == year
        and r.sale_date.month == month
        and r.quantity >= min_quantity
    )


def average_customer_age(records: Iterable[RecordLike], category: str) -> Optional[Decimal]:
    """Mean buyer age for a category, rounded to cents; None without known ages."""
    ages = [
        r.age for r in valid_records(records) if r.category == category and r.age is not None
    ]
    if not ages:
        return None
    return (Decimal(sum(ages)) / len(ages)).quantize(_CENTS, rounding=ROUND_HALF_UP)


def high_value_transactions(
    records: Iterable[RecordLike], threshold: Union[int, Decimal] = 1000
) -> List[SaleRecord]:
    """Sales whose total strictly exceeds `threshold`."""
    limit = Decimal(threshold)
    return _by_transaction(r for r in valid_records(records) if r.total_sale > limit)


def transactions_by_gender(records: Iterable[RecordLike]) -> List[GenderCount]:
    """Transaction counts per (category, gender), ordered by category then gender."""
    counts = Counter((r.category, r.gender) for r in valid_records(records))
    return [
        GenderCount(category=category, gender=gender, order_count=count)
        for (category, gender), count in sorted(counts.items())
    ]


__all__ = [
    "average_customer_age",
    "category_sales_in_month",
    "high_value_transactions",
    "sales_on_date",
    "transactions_by_gender",
]
