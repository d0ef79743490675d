"""
CSV source for offline analysis.

Reads a `retail_sales` export into plain row dictionaries. Values stay as
strings; parsing and validity checks belong to the domain layer.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, List

from retail_analytics.utils.logging import get_logger

log = get_logger(__name__)


def read_csv_rows(csv_path: Path | str) -> List[Dict[str, str]]:
    """
    Read every data row of a CSV export with a header line.

    Raises
    ------
    FileNotFoundError
        If `csv_path` does not exist.
    """
    path = Path(csv_path)
    with path.open("r", newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = [{(key or "").strip(): value for key, value in row.items()} for row in reader]
    log.info("CSV rows read", extra={"path": str(path), "rows": len(rows)})
    return rows


__all__ = ["read_csv_rows"]
