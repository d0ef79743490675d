"""
Input filtering for the analytics layer.

Rows arrive from the data-access layer as plain mappings (CSV dicts, database
rows) or as already-built `SaleRecord` instances. Anything that does not
validate is dropped, never raised.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from retail_analytics.domain.models import SaleRecord
from retail_analytics.utils.logging import get_logger

log = get_logger(__name__)

RecordLike = Union[SaleRecord, Mapping[str, Any]]


def _raw_transaction_id(raw: Any) -> Any:
    if isinstance(raw, Mapping):
        return raw.get("transaction_id", raw.get("transactions_id"))
    return None


def parse_record(raw: RecordLike) -> Optional[SaleRecord]:
    """
    Validate a single row.

    Returns None when the row is missing a required field or carries a value
    that cannot be parsed (e.g. a malformed date or time).
    """
    if isinstance(raw, SaleRecord):
        return raw
    try:
        return SaleRecord.model_validate(raw)
    except ValidationError as exc:
        log.debug(
            "Excluding invalid sale row",
            extra={
                "transaction_id": _raw_transaction_id(raw),
                "error_count": exc.error_count(),
                "fields": sorted({str(err["loc"][0]) for err in exc.errors() if err["loc"]}),
            },
        )
        return None


def valid_records(rows: Iterable[RecordLike]) -> Tuple[SaleRecord, ...]:
    """Return an immutable snapshot holding only the valid records of `rows`."""
    snapshot = []
    for raw in rows:
        record = parse_record(raw)
        if record is not None:
            snapshot.append(record)
    return tuple(snapshot)


__all__ = ["RecordLike", "parse_record", "valid_records"]
