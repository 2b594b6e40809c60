"""Output helpers shared by the CLI commands."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table


def print_json(data: Any) -> None:
    """Print ``data`` as JSON; objects that JSON cannot encode become strings."""
    print(json.dumps(data, indent=2, default=str))


def _cell(value: Any) -> str:
    if value is None:
        return "[dim]-[/dim]"
    if isinstance(value, bool):
        return "[green]yes[/green]" if value else "no"
    if isinstance(value, (list, tuple)):
        return escape(", ".join(str(v) for v in value)) if value else "[dim]-[/dim]"
    if isinstance(value, dict):
        return escape(", ".join(f"{k}={v}" for k, v in value.items())) if value else "[dim]-[/dim]"
    return escape(str(value))


def print_rows(
    rows: List[Dict[str, Any]],
    columns: Sequence[str],
    title: Optional[str] = None,
    console: Optional[Console] = None,
) -> None:
    """Print dict rows as a table with one column per key."""
    console = console or Console()
    if not rows:
        console.print("[yellow]No matches[/yellow]")
        return
    table = Table(title=escape(title) if title else None)
    for column in columns:
        table.add_column(column.replace("_", " ").title())
    for row in rows:
        table.add_row(*(_cell(row.get(column)) for column in columns))
    console.print(table)
    console.print(f"[dim]{len(rows)} match(es)[/dim]")


def print_mapping(
    data: Dict[str, Any], title: Optional[str] = None, console: Optional[Console] = None
) -> None:
    """Print a flat mapping as a two-column key/value table."""
    console = console or Console()
    table = Table(title=escape(title) if title else None, show_header=False)
    table.add_column("Key", style="dim")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(escape(key), _cell(value))
    console.print(table)
