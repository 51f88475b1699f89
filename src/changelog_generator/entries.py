"""Entry management utilities."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional

from .errors import DirectoryNotFound, MalformedEntry, UnknownEntryType
from .system import FileSystem
from .utils import join_with_conjunction, log_debug, log_warning

ENTRY_SUFFIX = ".md"
HEADING_PREFIX = "### "


class EntryType(Enum):
    """A kind of change as defined by Keep a Changelog.

    Members sort by their raw identifier, which is the order sections appear
    in a published release.
    """

    ADD = "add"
    CHANGE = "change"
    DEPRECATE = "deprecate"
    REMOVE = "remove"
    FIX = "fix"
    SECURITY = "security"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, EntryType):
            return NotImplemented
        return self.value < other.value

    @property
    def title(self) -> str:
        return ENTRY_TYPE_TITLES[self]

    @classmethod
    def from_title(cls, title: Optional[str]) -> Optional[EntryType]:
        if title is None:
            return None
        return _TITLES_TO_TYPES.get(title)

    @classmethod
    def valid_values(cls) -> list[str]:
        return [member.value for member in sorted(cls)]

    @classmethod
    def valid_values_sentence(cls) -> str:
        """Return the raw identifiers as "a, b, and c" for help text."""
        return join_with_conjunction(cls.valid_values())


ENTRY_TYPE_TITLES: dict[EntryType, str] = {
    EntryType.ADD: "Added",
    EntryType.CHANGE: "Changed",
    EntryType.DEPRECATE: "Deprecated",
    EntryType.REMOVE: "Removed",
    EntryType.FIX: "Fixed",
    EntryType.SECURITY: "Security",
}

_untitled = [member.name for member in EntryType if member not in ENTRY_TYPE_TITLES]
if _untitled:  # pragma: no cover - guards against incomplete edits
    raise RuntimeError(f"Entry types without a display title: {', '.join(_untitled)}")

_TITLES_TO_TYPES = {title: member for member, title in ENTRY_TYPE_TITLES.items()}


def parse_entry_type(raw: str) -> EntryType:
    """Return the entry type for a raw identifier such as ``fix``."""
    try:
        return EntryType(raw.strip())
    except ValueError:
        raise UnknownEntryType(raw, EntryType.valid_values()) from None


@dataclass
class Entry:
    """A single unreleased changelog entry."""

    type: EntryType
    text: str
    path: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        self.text = normalize_entry_text(self.text)

    @property
    def title(self) -> str:
        return self.type.title

    def serialize(self) -> str:
        """Render the entry in its on-disk format."""
        return f"{HEADING_PREFIX}{self.title}\n{self.text}"


def normalize_entry_text(text: str) -> str:
    """Return text ending in exactly one newline; reject empty text."""
    stripped = text.rstrip("\r\n")
    if not stripped.strip():
        raise ValueError("changelog entry text must not be empty")
    return stripped + "\n"


def parse_entry(content: str, path: Optional[Path] = None) -> Entry:
    """Parse an entry from its on-disk format."""
    if not content.strip():
        raise MalformedEntry(path, "the file is empty")
    heading, _, body = content.partition("\n")
    tokens = heading.split()
    entry_type = EntryType.from_title(tokens[-1] if tokens else None)
    if entry_type is None:
        valid = join_with_conjunction([f"'{HEADING_PREFIX}{title}'" for title in _TITLES_TO_TYPES])
        raise MalformedEntry(
            path,
            f"unknown heading '{heading.strip()}', expected one of {valid}",
        )
    try:
        return Entry(type=entry_type, text=body, path=path)
    except ValueError as exc:
        raise MalformedEntry(path, str(exc)) from exc


def new_entry_filename() -> str:
    """Return a collision-resistant file name for a new entry."""
    return f"{uuid.uuid4().hex}{ENTRY_SUFFIX}"


def group_entries(entries: Iterable[Entry]) -> dict[EntryType, list[Entry]]:
    """Group entries by type, keyed in canonical type order.

    Entries keep their relative order within a group.
    """
    buckets: dict[EntryType, list[Entry]] = {}
    for entry in entries:
        buckets.setdefault(entry.type, []).append(entry)
    return {entry_type: buckets[entry_type] for entry_type in sorted(buckets)}


@dataclass
class DeletionReport:
    """Outcome of removing published entry files."""

    deleted: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed


class EntryStore:
    """Directory of unreleased entry files."""

    def __init__(self, directory: Path, fs: FileSystem) -> None:
        self.directory = directory
        self._fs = fs

    def exists(self) -> bool:
        return self._fs.is_dir(self.directory)

    def create(self) -> None:
        self._fs.make_dirs(self.directory)

    def list_paths(self) -> list[Path]:
        """Return entry files sorted by name.

        Hidden files and files without the entry suffix (for example a
        ``.gitkeep``) are not entries.
        """
        if not self.exists():
            raise DirectoryNotFound(self.directory)
        paths = sorted(
            (
                path
                for path in self._fs.list_dir(self.directory)
                if path.suffix == ENTRY_SUFFIX
                and not path.name.startswith(".")
                and self._fs.is_file(path)
            ),
            key=lambda path: path.name,
        )
        log_debug(f"found {len(paths)} entry files in {self.directory}")
        return paths

    def read(self, path: Path) -> Entry:
        try:
            content = self._fs.read_text(path)
        except UnicodeDecodeError as exc:
            raise MalformedEntry(path, "the file is not valid UTF-8") from exc
        return parse_entry(content, path)

    def load_all(self) -> list[Entry]:
        """Read every entry, aborting on the first malformed file."""
        return [self.read(path) for path in self.list_paths()]

    def write(self, entry: Entry) -> Path:
        """Store a new entry under a fresh unique name and return its path."""
        path = self.directory / new_entry_filename()
        self._fs.create_file(path, entry.serialize())
        entry.path = path
        return path

    def delete_all(self, paths: Iterable[Path]) -> DeletionReport:
        """Remove every path, collecting failures instead of stopping."""
        report = DeletionReport()
        for path in paths:
            try:
                self._fs.remove(path)
            except OSError as exc:
                reason = exc.strerror or str(exc)
                log_warning(f"could not delete {path}: {reason}")
                report.failed.append((path, reason))
            else:
                report.deleted.append(path)
        return report
