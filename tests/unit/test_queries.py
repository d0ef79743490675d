from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from retail_analytics.analytics.queries import (
    average_customer_age,
    category_sales_in_month,
    high_value_transactions,
    sales_on_date,
    transactions_by_gender,
)
from retail_analytics.exceptions import InvalidArgument


def test_sales_on_date(sample_rows):
    rows = sales_on_date(sample_rows, date(2022, 2, 5))

    assert [r.transaction_id for r in rows] == [3]


def test_sales_on_date_ignores_invalid_rows(make_row):
    rows = [make_row(2), make_row(1), make_row(3, gender=None)]

    assert [r.transaction_id for r in sales_on_date(rows, date(2022, 11, 5))] == [1, 2]


def test_category_sales_in_month_filters_quantity(make_row):
    rows = [
        make_row(1, category="Clothing", sale_date="2022-11-02", quantity=4),
        make_row(2, category="Clothing", sale_date="2022-11-20", quantity=3),
        make_row(3, category="Clothing", sale_date="2022-12-01", quantity=4),
        make_row(4, category="Beauty", sale_date="2022-11-03", quantity=4),
    ]

    matched = category_sales_in_month(rows, "Clothing", 2022, 11)
    assert [r.transaction_id for r in matched] == [1]
    assert len(category_sales_in_month(rows, "Clothing", 2022, 11, min_quantity=1)) == 2


def test_category_sales_in_month_rejects_bad_month(sample_rows):
    with pytest.raises(InvalidArgument):
        category_sales_in_month(sample_rows, "Clothing", 2022, 13)


def test_average_customer_age(sample_rows):
    assert average_customer_age(sample_rows, "Beauty") == Decimal("32.50")
    assert average_customer_age(sample_rows, "Electronics") == Decimal("50.00")
    assert average_customer_age(sample_rows, "Toys") is None


def test_high_value_transactions_is_strict(make_row):
    rows = [
        make_row(1, total_sale="1000"),
        make_row(2, total_sale="1000.01"),
        make_row(3, total_sale="2000"),
    ]

    assert [r.transaction_id for r in high_value_transactions(rows)] == [2, 3]
    assert [r.transaction_id for r in high_value_transactions(rows, 1500)] == [3]


def test_transactions_by_gender(sample_rows):
    rows = transactions_by_gender(sample_rows)

    assert [(r.category, r.gender, r.order_count) for r in rows] == [
        ("Beauty", "Female", 1),
        ("Beauty", "Male", 1),
        ("Clothing", "Female", 1),
        ("Clothing", "Male", 1),
        ("Electronics", "Female", 1),
        ("Electronics", "Male", 1),
    ]


def test_empty_inputs():
    assert sales_on_date([], date(2022, 1, 1)) == []
    assert high_value_transactions([]) == []
    assert transactions_by_gender([]) == []
    assert average_customer_age([], "Beauty") is None
