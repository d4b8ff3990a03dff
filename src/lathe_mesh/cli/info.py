"""Read-only inspection commands."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import islice
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from lathe_mesh.config import get_settings
from lathe_mesh.core.convert import load_model
from lathe_mesh.core.tokenize import iter_line_items
from lathe_mesh.errors import LatheMeshError
from lathe_mesh.models import BinaryItem, EmptyItem

console = Console()
err_console = Console(stderr=True)


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def stats(
    path: Annotated[Path, typer.Argument(help="Path to the model file.")],
) -> None:
    """Show disk, disk information and body segment counts."""
    try:
        model = load_model(path, get_settings())
    except LatheMeshError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    summary = model.stats()
    _render_table(
        ["statistic", "value"],
        [
            ("disks", summary.disk_count),
            ("disk information", summary.disk_info_count),
            ("body segments", summary.body_segment_count),
            ("disk size", summary.disk_size),
        ],
    )


def tokens(
    path: Annotated[Path, typer.Argument(help="Path to the model file.")],
    limit: Annotated[int | None, typer.Option(help="Max rows to return.")] = None,
) -> None:
    """List the classified line items of a model file."""
    try:
        data = path.open("rb")
    except OSError as exc:
        err_console.print(f"[red]Cannot open {path}: {exc.strerror or exc}[/red]")
        raise typer.Exit(1) from None

    with data:
        items = list(islice(iter_line_items(data, get_settings().line_buffer_size), limit))

    rows: list[tuple[Any, ...]] = []
    for idx, item in enumerate(items):
        if isinstance(item, EmptyItem):
            value = ""
        elif isinstance(item, BinaryItem):
            value = f"<{len(item.value)} bytes>"
        else:
            value = item.value
        rows.append((idx + 1, item.kind, value))
    _render_table(["line", "kind", "value"], rows)
