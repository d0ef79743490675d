from __future__ import annotations

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

SECTION_TITLES: Dict[str, str] = {
    "category_totals": "Net Sales by Category",
    "best_month_per_year": "Best Selling Month per Year",
    "top_customers": "Top Customers by Spend",
    "unique_customers": "Unique Customers per Category",
    "shifts": "Orders by Shift",
    "gender_breakdown": "Transactions by Category and Gender",
    "high_value": "High Value Transactions",
}

# Columns holding money render right-aligned with thousands separators.
_MONEY_COLUMNS = {"net_sale", "avg_sale", "total_spend", "total_sale"}


def _format_cell(column: str, value: Any) -> str:
    if value is None:
        return "-"
    if column in _MONEY_COLUMNS:
        return f"{float(value):,.2f}"
    if isinstance(value, int) and not isinstance(value, bool) and column.endswith("count"):
        return f"{value:,}"
    return str(value)


def _section_table(name: str, section: Dict[str, Any]) -> Table:
    """Build a rich table for one section's rows."""
    rows: List[Dict[str, Any]] = section.get("rows", [])
    profile = section.get("profile") or {}
    caption = None
    if profile.get("duration_seconds") is not None:
        caption = f"computed in {profile['duration_seconds'] * 1000:.1f} ms"

    table = Table(
        title=SECTION_TITLES.get(name, name.replace("_", " ").title()),
        box=box.ROUNDED,
        caption=caption,
    )
    if not rows:
        table.add_column("Result", style="yellow")
        table.add_row("No rows")
        return table

    columns = list(rows[0].keys())
    for column in columns:
        numeric = isinstance(rows[0][column], (int, float)) and not isinstance(
            rows[0][column], bool
        )
        table.add_column(
            column.replace("_", " ").title(),
            justify="right" if numeric else "left",
            style="green" if column in _MONEY_COLUMNS else ("magenta" if numeric else "cyan"),
            no_wrap=True,
        )
    for row in rows:
        table.add_row(*(_format_cell(column, row.get(column)) for column in columns))
    return table


def print_report(payload: Dict[str, Any], console: Optional[Console] = None) -> None:
    """
    Render a report payload as a series of rich tables.

    Failed sections are shown as an error line instead of a table.
    """
    console = console or Console()

    sections: Dict[str, Dict[str, Any]] = payload.get("sections", {})
    if not sections:
        console.print("[yellow]No sections to display.[/yellow]")
        return

    console.print(
        f"[bold]Retail Sales Report[/bold] "
        f"[dim]{payload.get('valid_rows', 0):,} valid of {payload.get('rows_in', 0):,} rows "
        f"({payload.get('excluded_rows', 0):,} excluded)[/dim]"
    )
    for name, section in sections.items():
        if "error" in section:
            error_type = escape(str(section.get("error_type", "Error")))
            console.print(
                f"[red]{SECTION_TITLES.get(name, name)} failed: "
                f"{error_type}: {escape(str(section['error']))}[/red]"
            )
            continue
        console.print(_section_table(name, section))


__all__ = ["SECTION_TITLES", "print_report"]
