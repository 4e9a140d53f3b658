"""CLI helpers for inspecting and pruning repository clones."""

from __future__ import annotations

from typing import Annotated

from rich import box
from rich.table import Table
import typer

from cmdinclude.core.cache import CloneCache

from .._options import CloneRootOption
from ..state import get_cli_state


cache_app = typer.Typer(
    help="Inspect or clear shallow repository clones used for $PROJECT_DIR.",
    no_args_is_help=True,
)


@cache_app.command("list")
def list_clones(clone_root: CloneRootOption = None) -> None:
    """Print a table of cached clones."""
    cache = CloneCache.from_settings(clone_root)
    console = get_cli_state().console
    table = Table(
        title=f"Clones under {cache.root}",
        box=box.SQUARE,
        header_style="bold cyan",
    )
    table.add_column("Key", style="magenta")
    table.add_column("Location")

    entries = cache.entries()
    if not entries:
        table.add_row("-", "No clones found")
    else:
        for entry in entries:
            table.add_row(entry.name, str(entry))

    console.print(table)


@cache_app.command("clear")
def clear_clones(
    keys: Annotated[
        list[str] | None,
        typer.Argument(
            metavar="[KEY]...",
            help="Clone keys ('{component}-{branch}') to remove; all clones when omitted.",
        ),
    ] = None,
    clone_root: CloneRootOption = None,
) -> None:
    """Remove cached clones so the next build fetches them again."""
    cache = CloneCache.from_settings(clone_root)
    removed = cache.clear(keys or None)
    for path in removed:
        typer.echo(f"Removed {path}")
    typer.echo(f"{len(removed)} clone(s) removed.")


__all__ = ["cache_app", "clear_clones", "list_clones"]
