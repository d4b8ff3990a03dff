import logging
from typing import Annotated

import typer
from rich.console import Console

from lathe_mesh.cli.convert import convert
from lathe_mesh.cli.info import stats, tokens
from lathe_mesh.config import get_settings
from lathe_mesh.errors import LatheMeshError
from lathe_mesh.logging_config import setup_logging

app = typer.Typer(
    name="lathe-mesh",
    help="Lathe Mesh CLI — convert disk/body models to OBJ meshes.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console(stderr=True)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    try:
        settings = get_settings()
    except LatheMeshError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None

    setup_logging(logging.DEBUG if verbose else settings.log_level)


app.command("convert")(convert)
app.command("stats")(stats)
app.command("tokens")(tokens)


def main() -> None:
    app()
