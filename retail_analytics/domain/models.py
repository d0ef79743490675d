"""
Domain models for Retail Sales Analytics.

`SaleRecord` mirrors one row of the `retail_sales` table. A row that cannot be
validated into a `SaleRecord` is not a valid record and is left out of every
aggregate; only the required columns can make a row invalid. The remaining models are the immutable results handed to the
reporter and the JSON artifacts.
"""
from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from retail_analytics.utils.logging import get_logger

log = get_logger(__name__)

# Optional columns never invalidate a row; a value outside these types is dropped.
_OPTIONAL_COLUMN_TYPES = {
    "customer_id": TypeAdapter(int),
    "age": TypeAdapter(NonNegativeInt),
    "price_per_unit": TypeAdapter(Decimal),
}


class Shift(str, Enum):
    """Coarse time-of-day bucket of a sale."""

    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    EVENING = "Evening"


class SaleRecord(BaseModel):
    """
    Representation of a single row in the `retail_sales` table.

    Accepts both the canonical field names and the source table's column
    names (`transactions_id`, `quantiy`). Blank strings count as missing.
    An unparseable optional value (customer id, age, unit price) becomes None
    instead of invalidating the row.
    """

    transaction_id: int = Field(
        ...,
        validation_alias=AliasChoices("transaction_id", "transactions_id"),
        description="Primary key of the transaction.",
    )
    sale_date: date = Field(..., description="Calendar date of the sale.")
    sale_time: time = Field(..., description="Time of day of the sale.")
    customer_id: Optional[int] = Field(None, description="Buyer, when known.")
    gender: str = Field(..., description="Buyer gender as recorded at the till.")
    age: Optional[int] = Field(None, description="Buyer age, when known.")
    category: str = Field(..., min_length=1, description="Product category.")
    quantity: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("quantity", "quantiy"),
        description="Units sold.",
    )
    price_per_unit: Optional[Decimal] = Field(None, ge=0, description="Unit price.")
    cogs: Decimal = Field(..., ge=0, description="Cost of goods sold.")
    total_sale: Decimal = Field(..., ge=0, description="Amount charged.")

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("customer_id", "age", "price_per_unit", mode="before")
    @classmethod
    def drop_unparseable_optional(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            return None
        try:
            parsed = _OPTIONAL_COLUMN_TYPES[info.field_name].validate_python(value)
        except ValidationError:
            log.debug("Dropping unparseable optional value", extra={"field": info.field_name})
            return None
        if isinstance(parsed, Decimal) and (not parsed.is_finite() or parsed < 0):
            log.debug("Dropping out-of-range optional value", extra={"field": info.field_name})
            return None
        return parsed


class CategoryTotal(BaseModel):
    """Net sale and order count of one category."""

    net_sale: Decimal
    order_count: int

    model_config = ConfigDict(frozen=True)


class MonthlyAverage(BaseModel):
    """Average sale of one calendar month."""

    year: int
    month: int = Field(..., ge=1, le=12)
    avg_sale: Decimal

    model_config = ConfigDict(frozen=True)


class CustomerSpend(BaseModel):
    """Total spend of one customer."""

    customer_id: int
    total_spend: Decimal

    model_config = ConfigDict(frozen=True)


class GenderCount(BaseModel):
    """Number of transactions per (category, gender) pair."""

    category: str
    gender: str
    order_count: int

    model_config = ConfigDict(frozen=True)


__all__ = [
    "CategoryTotal",
    "CustomerSpend",
    "GenderCount",
    "MonthlyAverage",
    "SaleRecord",
    "Shift",
]
