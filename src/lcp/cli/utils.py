"""
CLI utility helpers: collaborator wiring, option parsing and output formatting.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from lcp.adapters import LocalFileStorageProvider
from lcp.core.errors import LcpError
from lcp.core.result import Ok, Result
from lcp.domain.models import DependencyConfiguration

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


# ── Options ──────────────────────────────────────────────────────────────


def data_dir_option() -> Any:
    return typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Storage root directory. Defaults to LCP_DATA_DIR or ~/.lcp.",
    )


def json_option() -> Any:
    return typer.Option(False, "--json", help="Output as JSON.")


def open_storage(data_dir: Path | None) -> LocalFileStorageProvider:
    return LocalFileStorageProvider(data_dir)


def parse_dependency(spec: str) -> DependencyConfiguration:
    """Parse ``type:name`` into a dependency declaration."""
    kind, sep, name = spec.partition(":")
    if not sep:
        raise typer.BadParameter(f"expected TYPE:NAME, got {spec!r}", param_hint="--dependency")
    return DependencyConfiguration(type=kind, name=name)


def parse_pairs(values: list[str], option: str) -> dict[str, str]:
    """Parse repeated ``key=value`` options into a dict."""
    pairs: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint=option)
        pairs[key] = value
    return pairs


# ── Output helpers ───────────────────────────────────────────────────────


def unwrap_or_exit(result: Result[T]) -> T:
    """Return the value of ``Ok``; print the error and exit 1 on ``Err``."""
    if isinstance(result, Ok):
        return result.value

    error = result.error
    code = error.code.value if isinstance(error, LcpError) else type(error).__name__
    err_console.print(f"[bold red]Error[/bold red] ({code}): {escape(str(error))}", highlight=False)
    if isinstance(error, LcpError):
        for failure in error.context.metadata.get("rollback_failures", []):
            err_console.print(f"  [yellow]rollback failed[/yellow] {failure['deployment_id']}: {failure['error']}")
    raise typer.Exit(code=1)


def emit_json(payload: Any) -> None:
    """Write JSON to stdout without Rich wrapping, so it can be piped."""
    if isinstance(payload, BaseModel):
        typer.echo(payload.model_dump_json(indent=2, by_alias=True, exclude_none=True))
    else:
        typer.echo(json.dumps(payload, indent=2, default=str))


def print_fields(data: dict[str, Any], *, title: str = "") -> None:
    """Render a flat mapping as a two-column Rich table."""
    table = Table(title=title or None, show_header=False, pad_edge=False)
    table.add_column("Field", style="bold cyan")
    table.add_column("Value", overflow="fold")
    for key, value in data.items():
        if value is None:
            continue
        if isinstance(value, dict | list):
            value = json.dumps(value, default=str)
        table.add_row(key, str(value))
    console.print(table)


def print_rows(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of flat mappings as a Rich table."""
    if not rows:
        console.print("[dim]No items.[/dim]")
        return
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(row.get(col, "")) for col in rows[0]))
    console.print(table)


__all__ = [
    "console",
    "err_console",
    "data_dir_option",
    "json_option",
    "open_storage",
    "parse_dependency",
    "parse_pairs",
    "unwrap_or_exit",
    "emit_json",
    "print_fields",
    "print_rows",
]
