"""Create unreleased changelog entries."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Optional, Sequence

from .config import Config
from .entries import Entry, EntryStore, EntryType, parse_entry_type
from .errors import (
    ChangelogDirectoryNotFound,
    DirectoryNotFound,
    HelpRequested,
    NoTextEntered,
)
from .system import (
    ClickConfirmer,
    ClickEditorRunner,
    Confirmer,
    ConsoleOutput,
    EditorRunner,
    FileSystem,
    LocalFileSystem,
    OutputSink,
)
from .utils import display_path, format_bold, log_debug, log_info

EDITOR_HINT = (
    "<!-- Enter your changelog message below this line exactly how you want it to "
    "appear in the changelog. Lines surrounded in Markdown (HTML) comments will be ignored. -->"
)

_HELP_TOKEN = "help"


def bulleted_text(lines: Sequence[str]) -> str:
    """Turn each argument into a Markdown bullet."""
    return "\n".join(f"- {line}" for line in lines) + "\n"


def strip_comment_lines(text: str) -> str:
    """Drop ``<!-- ... -->`` lines from editor input and trim the rest."""
    kept = []
    for line in text.splitlines():
        stripped = line.strip()
        if stripped.startswith("<!--") and stripped.endswith("-->"):
            continue
        kept.append(line.rstrip())
    return "\n".join(kept).strip()


class LogEngine:
    """Record new entries in the unreleased directory."""

    def __init__(
        self,
        config: Config,
        *,
        fs: Optional[FileSystem] = None,
        confirmer: Optional[Confirmer] = None,
        editor_runner: Optional[EditorRunner] = None,
        output: Optional[OutputSink] = None,
    ) -> None:
        self.config = config
        self._fs: FileSystem = fs or LocalFileSystem()
        self._confirmer: Confirmer = confirmer or ClickConfirmer()
        self._editor_runner: EditorRunner = editor_runner or ClickEditorRunner()
        self._output: OutputSink = output or ConsoleOutput()
        self.store = EntryStore(config.unreleased_directory, self._fs)

    def create_entry(
        self,
        entry_type: EntryType | str,
        text: Sequence[str] = (),
        *,
        editor: Optional[str] = None,
    ) -> Path:
        """Write an entry from ``text`` or, when empty, from an editor session."""
        if isinstance(entry_type, str):
            if entry_type.strip().lower() == _HELP_TOKEN:
                raise HelpRequested()
            entry_type = parse_entry_type(entry_type)
        if len(text) == 1 and text[0].strip().lower() == _HELP_TOKEN:
            raise HelpRequested()

        self._ensure_directory()
        if text:
            body = bulleted_text(text)
        else:
            body = self._compose_in_editor(editor or self.config.editor)

        entry = Entry(type=entry_type, text=body)
        path = self.store.write(entry)
        self._output.write(f"\n### {entry.title}\n{entry.text}", style="cyan")
        self._output.write(
            f"Created changelog entry at {display_path(path)}", style="bold green"
        )
        return path

    def _ensure_directory(self) -> None:
        if self.store.exists():
            return
        directory = self.store.directory
        if not self._confirmer.confirm(
            f"The directory {display_path(directory)} does not exist. Do you want to create it?"
        ):
            raise ChangelogDirectoryNotFound(directory)
        try:
            self.store.create()
        except OSError as exc:
            raise DirectoryNotFound(directory, exc.strerror or str(exc)) from exc
        log_info(f"created {format_bold(str(display_path(directory)))}.")

    def _compose_in_editor(self, editor: Optional[str]) -> str:
        with tempfile.TemporaryDirectory(prefix="changelog-") as scratch:
            buffer = Path(scratch) / "entry.md"
            buffer.write_text(EDITOR_HINT + "\n", encoding="utf-8")
            self._editor_runner.edit(buffer, editor)
            edited = buffer.read_text(encoding="utf-8")
        log_debug(f"editor returned {len(edited)} characters")
        body = strip_comment_lines(edited)
        if not body:
            raise NoTextEntered()
        return body + "\n"
