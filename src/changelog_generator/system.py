"""Narrow interfaces to the outside world and their production implementations.

The engines only talk to the filesystem, the terminal, the user, and the
editor through these protocols so tests can substitute fakes.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Protocol

import click
from rich.console import Console
from rich.text import Text

from .utils import abort_on_user_interrupt, log_debug


class FileSystem(Protocol):
    def is_dir(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def is_writable(self, path: Path) -> bool: ...

    def make_dirs(self, path: Path) -> None: ...

    def list_dir(self, path: Path) -> list[Path]: ...

    def read_text(self, path: Path) -> str: ...

    def create_file(self, path: Path, content: str) -> None:
        """Write a new file, failing with ``FileExistsError`` if it exists."""
        ...

    def replace_file(self, path: Path, content: str) -> None:
        """Replace the contents of ``path`` in one atomic step."""
        ...

    def remove(self, path: Path) -> None: ...


class OutputSink(Protocol):
    def write(self, text: str, *, style: Optional[str] = None) -> None: ...


class Confirmer(Protocol):
    def confirm(self, question: str) -> bool: ...


class EditorRunner(Protocol):
    def edit(self, path: Path, editor: Optional[str] = None) -> None:
        """Open ``path`` in an editor and block until it exits."""
        ...


class LocalFileSystem:
    """Filesystem access backed by :mod:`pathlib`."""

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def is_writable(self, path: Path) -> bool:
        return os.access(path, os.W_OK)

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def list_dir(self, path: Path) -> list[Path]:
        return list(path.iterdir())

    def read_text(self, path: Path) -> str:
        with path.open("r", encoding="utf-8", newline="") as handle:
            return handle.read()

    def create_file(self, path: Path, content: str) -> None:
        with path.open("x", encoding="utf-8", newline="") as handle:
            handle.write(content)

    def replace_file(self, path: Path, content: str) -> None:
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        temp_path = Path(temp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            if path.exists():
                shutil.copymode(path, temp_path)
            os.replace(temp_path, path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise
        log_debug(f"replaced {path} via {temp_path.name}")

    def remove(self, path: Path) -> None:
        path.unlink()


class ConsoleOutput:
    """Print user-facing output to stdout with rich styling."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console or Console(highlight=False)

    def write(self, text: str, *, style: Optional[str] = None) -> None:
        self._console.print(Text(text, style=style or ""), soft_wrap=True)


class ClickConfirmer:
    """Ask yes/no questions on the terminal."""

    def confirm(self, question: str) -> bool:
        try:
            return click.confirm(question, default=False)
        except (click.exceptions.Abort, KeyboardInterrupt) as exc:
            abort_on_user_interrupt(exc)


class ClickEditorRunner:
    """Launch an editor through :func:`click.edit`.

    Without an explicit editor click falls back to ``$VISUAL``, ``$EDITOR``,
    and finally a platform default.
    """

    def edit(self, path: Path, editor: Optional[str] = None) -> None:
        log_debug(f"opening {path} in {editor or 'the default editor'}")
        try:
            click.edit(filename=str(path), editor=editor)
        except (click.exceptions.Abort, KeyboardInterrupt) as exc:
            abort_on_user_interrupt(exc)
