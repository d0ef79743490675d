from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import psycopg
import typer

from retail_analytics.config import get_settings
from retail_analytics.exceptions import InvalidArgument
from retail_analytics.infrastructure.csv_source import read_csv_rows
from retail_analytics.infrastructure.db_factory import (
    apply_statement_timeout,
    get_sync_connection,
)
from retail_analytics.infrastructure.repository import (
    create_schema,
    fetch_rows,
    load_csv,
    purge_incomplete_rows,
)
from retail_analytics.orchestrator import ReportConfig, available_sections, run_report
from retail_analytics.reporter import print_report
from retail_analytics.utils.logging import configure_logging

app = typer.Typer(help="Retail Sales Analytics CLI.")


def _setup_logging() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _load_rows(source: str, csv_path: Optional[Path], limit: Optional[int]) -> List[Dict[str, Any]]:
    settings = get_settings()
    if source == "csv":
        rows = read_csv_rows(csv_path or Path(settings.data_csv_path))
        return rows[:limit] if limit is not None else rows

    conn = get_sync_connection()
    try:
        with conn.cursor() as cur:
            apply_statement_timeout(cur, settings.db_statement_timeout_ms)
        return fetch_rows(conn, limit=limit)
    finally:
        conn.close()


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"source={settings.data_source} csv={settings.data_csv_path} | "
        f"top={settings.top_customers} high_value>{settings.high_value_threshold} "
        f"results={settings.results_dir}"
    )


@app.command()
def sections() -> None:
    """
    List available report sections.
    """
    typer.echo("Available sections: " + ", ".join(available_sections()))


@app.command("init-db")
def init_db() -> None:
    """
    Create the retail_sales table if it does not exist.
    """
    _setup_logging()
    conn = get_sync_connection()
    try:
        create_schema(conn)
    finally:
        conn.close()
    typer.echo("Schema ready.")


@app.command("load-csv")
def load_csv_command(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV export to load."),
) -> None:
    """
    Bulk-load a CSV export into retail_sales via COPY.
    """
    _setup_logging()
    conn = get_sync_connection()
    try:
        create_schema(conn)
        copied = load_csv(conn, path)
    finally:
        conn.close()
    typer.echo(f"Loaded {copied:,} rows from {path}.")


@app.command()
def purge() -> None:
    """
    Delete rows that are missing required values.
    """
    _setup_logging()
    conn = get_sync_connection()
    try:
        deleted = purge_incomplete_rows(conn)
    finally:
        conn.close()
    typer.echo(f"Deleted {deleted:,} incomplete rows.")


@app.command()
def report(
    source: Optional[str] = typer.Option(
        None,
        "--source",
        help="Where to read rows from: csv or db (default from settings).",
    ),
    csv_path: Optional[Path] = typer.Option(
        None,
        "--csv",
        help="CSV export to analyse when --source=csv (default from settings).",
    ),
    section: Optional[List[str]] = typer.Option(
        None,
        "--section",
        "-s",
        help="Section to compute; repeat for several (default: all).",
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-n",
        min=1,
        help="Number of top customers to show (default from settings).",
    ),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        min=0,
        help="Only analyse the first N rows.",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the payload as JSON."),
    no_persist: bool = typer.Option(False, "--no-persist", help="Do not write results/ files."),
    strict: bool = typer.Option(False, "--strict", help="Abort on the first failing section."),
) -> None:
    """
    Compute report sections over the sales snapshot and render them.
    """
    settings = get_settings()
    _setup_logging()
    effective_source = source or settings.data_source
    if effective_source not in ("csv", "db"):
        typer.echo(f"Unknown source '{effective_source}'. Use csv or db.", err=True)
        raise typer.Exit(code=2)

    try:
        rows = _load_rows(effective_source, csv_path, limit)
        payload = run_report(
            rows,
            ReportConfig(
                section_names=section or None,
                top_n=top,
                persist=not no_persist,
                failure_policy="strict" if strict else "tolerant",
            ),
        )
    except InvalidArgument as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=2)
    except (FileNotFoundError, psycopg.Error) as exc:
        typer.echo(f"Could not load rows: {exc}", err=True)
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(payload, indent=2))
    else:
        print_report(payload)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
