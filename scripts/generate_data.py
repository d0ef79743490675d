"""
Synthetic data generation and loading script for Retail Sales Analytics.

Writes a deterministic pseudo-random `retail_sales` CSV export (including a
configurable share of incomplete rows) and optionally COPYs it into Postgres.
"""

from __future__ import annotations

import csv
import random
import sys
import tempfile
import time
from datetime import date, time as dtime, timedelta
from pathlib import Path

import typer

from retail_analytics.infrastructure.db_factory import get_sync_connection
from retail_analytics.infrastructure.repository import COLUMNS, create_schema, load_csv

app = typer.Typer(help="Generate a synthetic retail_sales CSV and load it into Postgres.")

CATEGORIES = ["Beauty", "Clothing", "Electronics"]
GENDERS = ["Male", "Female"]
PRICE_POINTS = [25, 30, 50, 300, 500]
# Columns that may be blanked out when an incomplete row is generated.
NULLABLE_COLUMNS = ["customer_id", "gender", "age", "category", "quantiy", "cogs", "total_sale"]


def _generate_rows_csv(
    csv_path: Path,
    rows: int,
    batch_size: int,
    seed: int,
    start: date = date(2022, 1, 1),
    days: int = 730,
    incomplete_ratio: float = 0.01,
) -> None:
    rng = random.Random(seed)

    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(COLUMNS)

        buffer: list[list[str]] = []
        for i in range(rows):
            quantity = rng.randint(1, 4)
            price = rng.choice(PRICE_POINTS)
            total = quantity * price
            row = {
                "transactions_id": str(i + 1),
                "sale_date": (start + timedelta(days=rng.randrange(days))).isoformat(),
                "sale_time": dtime(
                    rng.randint(6, 22), rng.randint(0, 59), rng.randint(0, 59)
                ).isoformat(),
                "customer_id": str(rng.randint(1, 155)),
                "gender": rng.choice(GENDERS),
                "age": str(rng.randint(18, 64)),
                "category": rng.choice(CATEGORIES),
                "quantiy": str(quantity),
                "price_per_unit": str(price),
                "cogs": f"{price * rng.uniform(0.1, 0.5):.2f}",
                "total_sale": str(total),
            }
            if rng.random() < incomplete_ratio:
                row[rng.choice(NULLABLE_COLUMNS)] = ""
            buffer.append([row[column] for column in COLUMNS])
            if len(buffer) >= batch_size:
                writer.writerows(buffer)
                buffer.clear()
        if buffer:
            writer.writerows(buffer)


def _copy_into_db(dsn: str | None, csv_path: Path) -> int:
    conn = get_sync_connection(dsn)
    try:
        create_schema(conn)
        return load_csv(conn, csv_path)
    finally:
        conn.close()


@app.command()
def main(
    rows: int = typer.Option(
        2_000,
        "--rows",
        "-r",
        help="Number of rows to generate.",
    ),
    batch_size: int = typer.Option(
        1_000,
        "--batch-size",
        "-b",
        help="Batch size for CSV buffering during generation.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    incomplete_ratio: float = typer.Option(
        0.01,
        "--incomplete-ratio",
        min=0.0,
        max=1.0,
        help="Share of rows generated with one required value missing.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path (if omitted, a temp file will be used).",
    ),
    dsn: str | None = typer.Option(
        None,
        "--dsn",
        help="Optional DSN override for Postgres.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only generate CSV; skip loading into Postgres.",
    ),
) -> None:
    """
    Generate synthetic sales and optionally load them into Postgres using COPY.
    """
    started = time.perf_counter()
    if output:
        csv_path = output
        csv_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        tmpdir = Path(tempfile.mkdtemp(prefix="retail_sales_csv_"))
        csv_path = tmpdir / "retail_sales.csv"

    typer.echo(f"Generating {rows:,} rows -> {csv_path} (seed={seed})")
    _generate_rows_csv(
        csv_path, rows=rows, batch_size=batch_size, seed=seed, incomplete_ratio=incomplete_ratio
    )
    typer.echo(f"CSV generation completed in {time.perf_counter() - started:.2f}s")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    typer.echo("Loading CSV into Postgres via COPY...")
    copied = _copy_into_db(dsn, csv_path)
    typer.echo(f"Loaded {copied:,} rows in {time.perf_counter() - started:.2f}s total.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
