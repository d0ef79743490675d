"""
Orchestrator for running report sections, profiling them, and persisting results.

Usage (example from CLI):
    from retail_analytics.orchestrator import ReportConfig, run_report

    payload = run_report(rows, ReportConfig(section_names=["top_customers"], top_n=10))
    print(payload["sections"]["top_customers"]["rows"])

Outputs are saved to `results/` by default:
- `results/latest.json` (last run)
- `results/report-<timestamp>.json` (timestamped archive)
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Literal, Optional

from retail_analytics.analytics.queries import high_value_transactions, transactions_by_gender
from retail_analytics.analytics.sales import SalesAnalytics
from retail_analytics.config import get_settings
from retail_analytics.domain.validation import RecordLike
from retail_analytics.exceptions import InvalidArgument
from retail_analytics.utils.logging import get_logger
from retail_analytics.utils.profiler import profile_block

log = get_logger(__name__)

SectionRows = List[Dict[str, Any]]
SectionFn = Callable[[SalesAnalytics, "ReportConfig"], SectionRows]


@dataclass(frozen=True)
class ReportConfig:
    """
    Options for a single report run.

    Attributes
    ----------
    section_names : iterable[str] | None
        Sections to compute. None or ["all"] computes every section.
    top_n : int | None
        Size of the top-customers list. Defaults to settings.top_customers.
    high_value_threshold : int | None
        Lower bound (exclusive) for high-value transactions.
    results_dir : Path | str | None
        Directory for JSON artifacts. Defaults to settings.results_dir.
    persist : bool
        Whether to write the payload to disk.
    failure_policy : "tolerant" | "strict"
        Tolerant records a failing section and moves on; strict re-raises.
    """

    section_names: Optional[Iterable[str]] = None
    top_n: Optional[int] = None
    high_value_threshold: Optional[int] = None
    results_dir: Optional[Path | str] = None
    persist: bool = True
    failure_policy: Literal["tolerant", "strict"] = "tolerant"


def _money(value: Decimal) -> float:
    """Round a monetary amount to cents for human-readable output."""
    return round(float(value), 2)


def _category_totals(analytics: SalesAnalytics, config: ReportConfig) -> SectionRows:
    totals = analytics.category_totals()
    ranked = sorted(totals.items(), key=lambda item: (-item[1].net_sale, item[0]))
    return [
        {"category": category, "net_sale": _money(t.net_sale), "order_count": t.order_count}
        for category, t in ranked
    ]


def _best_month_per_year(analytics: SalesAnalytics, config: ReportConfig) -> SectionRows:
    return [
        {"year": row.year, "month": row.month, "avg_sale": _money(row.avg_sale)}
        for row in analytics.best_month_per_year()
    ]


def _top_customers(analytics: SalesAnalytics, config: ReportConfig) -> SectionRows:
    n = config.top_n if config.top_n is not None else get_settings().top_customers
    return [
        {"rank": rank, "customer_id": row.customer_id, "total_spend": _money(row.total_spend)}
        for rank, row in enumerate(analytics.top_customers(n), start=1)
    ]


def _unique_customers(analytics: SalesAnalytics, config: ReportConfig) -> SectionRows:
    counts = analytics.unique_customers_per_category()
    return [
        {"category": category, "unique_customers": counts[category]} for category in sorted(counts)
    ]


def _shifts(analytics: SalesAnalytics, config: ReportConfig) -> SectionRows:
    return [
        {"shift": shift.value, "order_count": count}
        for shift, count in analytics.shift_counts().items()
    ]


def _gender_breakdown(analytics: SalesAnalytics, config: ReportConfig) -> SectionRows:
    return [
        {"category": row.category, "gender": row.gender, "order_count": row.order_count}
        for row in transactions_by_gender(analytics.records)
    ]


def _high_value(analytics: SalesAnalytics, config: ReportConfig) -> SectionRows:
    threshold = (
        config.high_value_threshold
        if config.high_value_threshold is not None
        else get_settings().high_value_threshold
    )
    return [
        {
            "transaction_id": r.transaction_id,
            "sale_date": r.sale_date.isoformat(),
            "category": r.category,
            "total_sale": _money(r.total_sale),
        }
        for r in high_value_transactions(analytics.records, threshold)
    ]


def _section_factories() -> Dict[str, SectionFn]:
    """Registry of available report sections, in display order."""
    return {
        "category_totals": _category_totals,
        "best_month_per_year": _best_month_per_year,
        "top_customers": _top_customers,
        "unique_customers": _unique_customers,
        "shifts": _shifts,
        "gender_breakdown": _gender_breakdown,
        "high_value": _high_value,
    }


def available_sections() -> List[str]:
    """List available section names in display order."""
    return list(_section_factories().keys())


def _resolve_sections(names: Optional[Iterable[str]]) -> List[str]:
    requested = list(names) if names is not None else ["all"]
    if not requested or requested == ["all"]:
        return available_sections()
    factories = _section_factories()
    unknown = [name for name in requested if name not in factories]
    if unknown:
        raise InvalidArgument(
            f"Unknown section(s) {', '.join(unknown)}. Available: {', '.join(factories)}"
        )
    return requested


def _persist_results(payload: dict, results_dir: Path) -> Path:
    results_dir.mkdir(parents=True, exist_ok=True)
    latest_path = results_dir / "latest.json"
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    archive_path = results_dir / f"report-{timestamp}.json"

    for path in (latest_path, archive_path):
        with path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    log.info("Report persisted", extra={"latest": str(latest_path), "archive": str(archive_path)})
    return latest_path


def _profiled_section(
    name: str, section: SectionFn, analytics: SalesAnalytics, config: ReportConfig
) -> Dict[str, Any]:
    log.info(f"[SECTION START] {name}", extra={"section": name})
    with profile_block(name) as stats:
        try:
            rows = section(analytics, config)
            result: Dict[str, Any] = {"rows": rows}
            log.info(f"[SECTION SUCCESS] {name}", extra={"section": name, "rows": len(rows)})
        except Exception as exc:  # noqa: BLE001 - tolerant policy records failures
            if config.failure_policy == "strict":
                raise
            log.exception(f"[SECTION FAILED] {name}", extra={"section": name})
            result = {
                "rows": [],
                "error": str(exc),
                "error_type": type(exc).__name__,
            }
    result["profile"] = stats.as_dict()
    return result


def run_report(
    records: Iterable[RecordLike], config: Optional[ReportConfig] = None
) -> Dict[str, Any]:
    """
    Validate a snapshot once and compute the requested report sections.

    Parameters
    ----------
    records : iterable
        Raw rows or `SaleRecord` instances.
    config : ReportConfig | None
        Run options; defaults to every section with settings-driven defaults.

    Returns
    -------
    dict
        Payload with input/valid row counts and one entry per section holding
        its rows and profiler stats (plus `error` when a section failed).

    Raises
    ------
    InvalidArgument
        If an unknown section name is requested.
    """
    config = config or ReportConfig()
    names = _resolve_sections(config.section_names)

    rows = list(records)
    analytics = SalesAnalytics(rows)
    excluded = len(rows) - len(analytics)
    log.info(
        "Snapshot validated",
        extra={"rows_in": len(rows), "valid_rows": len(analytics), "excluded_rows": excluded},
    )

    factories = _section_factories()
    sections: Dict[str, Dict[str, Any]] = {}
    for name in names:
        sections[name] = _profiled_section(name, factories[name], analytics, config)

    payload: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "rows_in": len(rows),
        "valid_rows": len(analytics),
        "excluded_rows": excluded,
        "sections": sections,
    }

    if config.persist:
        results_dir = config.results_dir or get_settings().results_dir
        _persist_results(payload, Path(results_dir))

    failed = [name for name, section in sections.items() if "error" in section]
    log.info(
        f"[REPORT COMPLETE] {len(names) - len(failed)}/{len(names)} section(s) computed",
        extra={"sections": names, "failed": failed},
    )
    return payload


__all__ = [
    "ReportConfig",
    "available_sections",
    "run_report",
]
