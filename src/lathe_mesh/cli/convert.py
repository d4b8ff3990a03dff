from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from lathe_mesh.config import get_settings
from lathe_mesh.core.convert import convert_file
from lathe_mesh.core.mesh import write_obj
from lathe_mesh.errors import LatheMeshError
from lathe_mesh.models import DefaultCrossSection

console = Console(stderr=True)


def convert(
    path: Annotated[Path, typer.Argument(help="Path to the model file.")],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the OBJ here instead of stdout.")
    ] = None,
    groups: Annotated[bool | None, typer.Option("--groups/--no-groups", help="Emit a group line per loop.")] = None,
    default_cross_section: Annotated[
        DefaultCrossSection | None,
        typer.Option(help="Cross-section used by childless segments that have no disk of their own."),
    ] = None,
) -> None:
    """Convert a model file to a wavefront OBJ mesh."""
    settings = get_settings()
    if groups is not None:
        settings.emit_groups = groups
    if default_cross_section is not None:
        settings.default_cross_section = default_cross_section

    try:
        _, mesh = convert_file(path, settings)
    except LatheMeshError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    if output is None:
        for line in mesh.to_obj_lines(include_groups=settings.emit_groups):
            typer.echo(line)
    else:
        with output.open("w", encoding="ascii") as handle:
            write_obj(mesh, handle, include_groups=settings.emit_groups)
        console.print(
            f"[green]Wrote[/green] {mesh.vertex_count} vertices and {mesh.face_count} faces to {output}"
        )
