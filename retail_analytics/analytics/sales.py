"""
Core sales analytics over an in-memory snapshot of `retail_sales` rows.

Every function accepts `SaleRecord` instances or raw row mappings, drops the
rows that do not validate, and returns plain containers of result models.
Nothing here performs I/O or mutates its input.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import time
from decimal import Decimal
from typing import Dict, Iterable, List, Set, Tuple

from retail_analytics.domain.models import (
    CategoryTotal,
    CustomerSpend,
    MonthlyAverage,
    SaleRecord,
    Shift,
)
from retail_analytics.domain.validation import RecordLike, valid_records
from retail_analytics.exceptions import InvalidArgument

DEFAULT_TOP_N = 5

_NOON = time(12, 0)
_AFTERNOON_END = time(17, 0)


def category_totals(records: Iterable[RecordLike]) -> Dict[str, CategoryTotal]:
    """Net sale and order count per category."""
    net: Dict[str, Decimal] = defaultdict(Decimal)
    orders: Dict[str, int] = defaultdict(int)
    for record in valid_records(records):
        net[record.category] += record.total_sale
        orders[record.category] += 1
    return {
        category: CategoryTotal(net_sale=net[category], order_count=orders[category])
        for category in net
    }


def best_month_per_year(records: Iterable[RecordLike]) -> List[MonthlyAverage]:
    """
    Return the month with the highest average sale for each year.

    Months are ranked by average sale descending; on a tie the earlier month
    wins. Rows are ordered by year.
    """
    sums: Dict[Tuple[int, int], Decimal] = defaultdict(Decimal)
    counts: Dict[Tuple[int, int], int] = defaultdict(int)
    for record in valid_records(records):
        key = (record.sale_date.year, record.sale_date.month)
        sums[key] += record.total_sale
        counts[key] += 1

    best: Dict[int, MonthlyAverage] = {}
    for (year, month) in sorted(sums):
        avg_sale = sums[(year, month)] / counts[(year, month)]
        current = best.get(year)
        # Months are visited in ascending order, so only a strictly higher average displaces.
        if current is None or avg_sale > current.avg_sale:
            best[year] = MonthlyAverage(year=year, month=month, avg_sale=avg_sale)
    return [best[year] for year in sorted(best)]


def top_customers(records: Iterable[RecordLike], n: int = DEFAULT_TOP_N) -> List[CustomerSpend]:
    """
    Return the `n` customers with the highest total spend.

    Ties on spend are ordered by ascending customer id. Rows without a
    customer id are not attributed to anyone.

    Raises
    ------
    InvalidArgument
        If `n` is not a positive integer.
    """
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise InvalidArgument(f"n must be a positive integer, got {n!r}")

    spend: Dict[int, Decimal] = defaultdict(Decimal)
    for record in valid_records(records):
        if record.customer_id is not None:
            spend[record.customer_id] += record.total_sale

    ranked = sorted(spend.items(), key=lambda item: (-item[1], item[0]))
    return [
        CustomerSpend(customer_id=customer_id, total_spend=total)
        for customer_id, total in ranked[:n]
    ]


def unique_customers_per_category(records: Iterable[RecordLike]) -> Dict[str, int]:
    """Count of distinct known customers per category."""
    customers: Dict[str, Set[int]] = defaultdict(set)
    for record in valid_records(records):
        if record.customer_id is not None:
            customers[record.category].add(record.customer_id)
        else:
            customers.setdefault(record.category, set())
    return {category: len(ids) for category, ids in customers.items()}


def classify_shift(sale_time: time) -> Shift:
    """
    Bucket a time of day into a shift.

    Before 12:00 is Morning, 12:00 through 17:00 inclusive is Afternoon, and
    anything after 17:00 is Evening.
    """
    moment = sale_time.replace(tzinfo=None)
    if moment < _NOON:
        return Shift.MORNING
    if moment <= _AFTERNOON_END:
        return Shift.AFTERNOON
    return Shift.EVENING


def shift_counts(records: Iterable[RecordLike]) -> Dict[Shift, int]:
    """Order count per shift; every shift is present even when zero."""
    counts: Dict[Shift, int] = {shift: 0 for shift in Shift}
    for record in valid_records(records):
        counts[classify_shift(record.sale_time)] += 1
    return counts


class SalesAnalytics:
    """
    Analytics bound to a single validated snapshot.

    Validation runs once in the constructor; each method then works on the
    stored tuple of valid records.
    """

    def __init__(self, records: Iterable[RecordLike]) -> None:
        self._records: Tuple[SaleRecord, ...] = valid_records(records)

    @property
    def records(self) -> Tuple[SaleRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def category_totals(self) -> Dict[str, CategoryTotal]:
        return category_totals(self._records)

    def best_month_per_year(self) -> List[MonthlyAverage]:
        return best_month_per_year(self._records)

    def top_customers(self, n: int = DEFAULT_TOP_N) -> List[CustomerSpend]:
        return top_customers(self._records, n)

    def unique_customers_per_category(self) -> Dict[str, int]:
        return unique_customers_per_category(self._records)

    def shift_counts(self) -> Dict[Shift, int]:
        return shift_counts(self._records)


__all__ = [
    "DEFAULT_TOP_N",
    "SalesAnalytics",
    "best_month_per_year",
    "category_totals",
    "classify_shift",
    "shift_counts",
    "top_customers",
    "unique_customers_per_category",
]
