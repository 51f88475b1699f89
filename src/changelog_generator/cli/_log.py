"""Log command for creating changelog entries."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import click

from ..entries import EntryType
from ._core import CLIContext

__all__ = [
    "run_log",
    "log_cmd",
]


def run_log(
    ctx: CLIContext,
    *,
    entry_type: EntryType | str,
    text: Sequence[str] = (),
    editor: Optional[str] = None,
) -> Path:
    """Python wrapper for creating entries that mirrors the CLI behavior."""

    return ctx.log_engine().create_entry(entry_type, text, editor=editor)


@click.command(
    "log",
    help=(
        "Create a new changelog entry.\n\n"
        "ENTRY_TYPE is one of "
        f"{EntryType.valid_values_sentence()}. Each TEXT argument becomes a "
        "bullet in the entry; without TEXT an editor opens so the entry can be "
        "written in free-form Markdown."
    ),
)
@click.argument("entry_type", metavar="ENTRY_TYPE")
@click.argument("text", nargs=-1)
@click.option(
    "--editor",
    "-e",
    help="Editor executable used when no TEXT is given (defaults to $VISUAL or $EDITOR).",
)
@click.pass_obj
def log_cmd(
    ctx: CLIContext,
    entry_type: str,
    text: tuple[str, ...],
    editor: Optional[str],
) -> None:
    run_log(ctx, entry_type=entry_type, text=text, editor=editor)
