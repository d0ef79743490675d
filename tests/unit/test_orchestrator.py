from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import pytest

from retail_analytics import orchestrator
from retail_analytics.orchestrator import ReportConfig, available_sections, run_report
from retail_analytics.exceptions import InvalidArgument

EXPECTED_ROWS_IN = 9
EXPECTED_VALID_ROWS = 6
EXPECTED_EXCLUDED_ROWS = 3


def _boom(analytics, config) -> List[Dict[str, Any]]:
    raise RuntimeError("intentional failure")


def test_available_sections_contains_known_entries():
    names = available_sections()

    assert names[0] == "category_totals"
    for name in ("best_month_per_year", "top_customers", "unique_customers", "shifts"):
        assert name in names


def test_run_report_computes_every_section(sample_rows):
    payload = run_report(sample_rows, ReportConfig(persist=False, top_n=2))

    assert payload["rows_in"] == EXPECTED_ROWS_IN
    assert payload["valid_rows"] == EXPECTED_VALID_ROWS
    assert payload["excluded_rows"] == EXPECTED_EXCLUDED_ROWS
    assert list(payload["sections"]) == available_sections()

    sections = payload["sections"]
    assert sections["category_totals"]["rows"][0] == {
        "category": "Electronics",
        "net_sale": 1550.0,
        "order_count": 2,
    }
    assert sections["top_customers"]["rows"] == [
        {"rank": 1, "customer_id": 3, "total_spend": 1500.0},
        {"rank": 2, "customer_id": 2, "total_spend": 1100.0},
    ]
    assert sections["best_month_per_year"]["rows"] == [
        {"year": 2022, "month": 2, "avg_sale": 900.0},
        {"year": 2023, "month": 3, "avg_sale": 900.0},
    ]
    assert sections["shifts"]["rows"] == [
        {"shift": "Morning", "order_count": 2},
        {"shift": "Afternoon", "order_count": 3},
        {"shift": "Evening", "order_count": 1},
    ]
    assert [r["transaction_id"] for r in sections["high_value"]["rows"]] == [4]
    assert sections["top_customers"]["profile"]["duration_seconds"] >= 0


def test_run_report_uses_settings_defaults(sample_rows, monkeypatch):
    monkeypatch.setenv("TOP_CUSTOMERS", "1")
    monkeypatch.setenv("HIGH_VALUE_THRESHOLD", "100")

    payload = run_report(sample_rows, ReportConfig(persist=False))

    assert len(payload["sections"]["top_customers"]["rows"]) == 1
    assert [r["transaction_id"] for r in payload["sections"]["high_value"]["rows"]] == [2, 3, 4, 5]


def test_run_report_selected_sections_only(sample_rows):
    payload = run_report(
        sample_rows, ReportConfig(section_names=["shifts", "top_customers"], persist=False)
    )

    assert list(payload["sections"]) == ["shifts", "top_customers"]


def test_run_report_rejects_unknown_section(sample_rows):
    with pytest.raises(InvalidArgument, match="nope"):
        run_report(sample_rows, ReportConfig(section_names=["nope"], persist=False))


def test_run_report_persists_latest_and_archive(sample_rows, tmp_path: Path):
    run_report(sample_rows, ReportConfig(results_dir=tmp_path, section_names=["shifts"]))

    latest = json.loads((tmp_path / "latest.json").read_text(encoding="utf-8"))
    assert latest["valid_rows"] == EXPECTED_VALID_ROWS
    assert "shifts" in latest["sections"]
    assert len(list(tmp_path.glob("report-*.json"))) == 1


def test_run_report_on_empty_input():
    payload = run_report([], ReportConfig(persist=False))

    assert payload["valid_rows"] == 0
    assert payload["sections"]["category_totals"]["rows"] == []
    assert [r["order_count"] for r in payload["sections"]["shifts"]["rows"]] == [0, 0, 0]


def test_tolerant_policy_records_failures(sample_rows, monkeypatch):
    monkeypatch.setattr(
        orchestrator,
        "_section_factories",
        lambda: {"boom": _boom, "shifts": orchestrator._shifts},
    )

    payload = run_report(sample_rows, ReportConfig(persist=False))

    failed = payload["sections"]["boom"]
    assert failed["rows"] == []
    assert failed["error"] == "intentional failure"
    assert failed["error_type"] == "RuntimeError"
    assert "error" not in payload["sections"]["shifts"]


def test_strict_policy_fails_fast(sample_rows, monkeypatch):
    monkeypatch.setattr(orchestrator, "_section_factories", lambda: {"boom": _boom})

    with pytest.raises(RuntimeError, match="intentional failure"):
        run_report(sample_rows, ReportConfig(persist=False, failure_policy="strict"))
