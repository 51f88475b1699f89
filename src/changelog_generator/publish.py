"""Publish unreleased entries into the changelog."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .config import Config
from .document import (
    LATEST_RELEASE_ANCHOR,
    compose_document,
    render_release_section,
    split_at_anchor,
)
from .entries import Entry, EntryStore, EntryType, group_entries
from .errors import ChangelogNotFound, MissingVersion, NoEntriesFound, ReleaseAnchorConflict
from .system import ConsoleOutput, FileSystem, LocalFileSystem, OutputSink
from .utils import default_release_date, display_path, log_debug, log_success, log_warning


@dataclass
class PublishOptions:
    version: str
    release_date: Optional[str] = None
    dry_run: bool = False


@dataclass
class PublishSummary:
    """Result of a publish run.

    A dry run carries the same section and groupings as a real run; only
    ``deleted`` stays empty.
    """

    version: str
    release_date: str
    section: str
    grouped: dict[EntryType, list[Entry]]
    entry_paths: list[Path]
    changelog_path: Path
    dry_run: bool
    deleted: list[Path] = field(default_factory=list)
    failed_deletions: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def entry_count(self) -> int:
        return len(self.entry_paths)

    @property
    def complete(self) -> bool:
        """Whether every consumed entry file was removed (always true for dry runs)."""
        return not self.failed_deletions


class PublishEngine:
    """Merge every unreleased entry into the changelog under a new version."""

    def __init__(
        self,
        config: Config,
        *,
        fs: Optional[FileSystem] = None,
        output: Optional[OutputSink] = None,
    ) -> None:
        self.config = config
        self._fs: FileSystem = fs or LocalFileSystem()
        self._output: OutputSink = output or ConsoleOutput()
        self.store = EntryStore(config.unreleased_directory, self._fs)

    def publish(self, options: PublishOptions) -> PublishSummary:
        version = options.version.strip()
        if not version:
            raise MissingVersion()
        release_date = options.release_date or default_release_date()
        changelog_path = self.config.changelog_file

        entries = self.store.load_all()
        if not entries:
            raise NoEntriesFound(self.store.directory)
        grouped = group_entries(entries)
        entry_paths = [entry.path for entry in entries if entry.path is not None]

        document = split_at_anchor(self._read_changelog(changelog_path), path=changelog_path)
        header = self._read_header()
        if header is None and document.header.strip():
            log_warning(
                f"text above the release anchor in {display_path(changelog_path)} is "
                "replaced on publish; keep it in a header file (--header) to preserve it."
            )
        section = render_release_section(version, release_date, grouped)
        content = compose_document(section, document.body, header=header)
        self._check_single_anchor(content, changelog_path, entries, header)

        summary = PublishSummary(
            version=version,
            release_date=release_date,
            section=section,
            grouped=grouped,
            entry_paths=entry_paths,
            changelog_path=changelog_path,
            dry_run=options.dry_run,
        )
        self._output.write(f"\n{section}\n", style="cyan")

        if options.dry_run:
            self._output.write(
                f"(dry run) would have deleted {summary.entry_count} "
                "unreleased changelog entries.",
                style="yellow",
            )
            return summary

        try:
            self._fs.replace_file(changelog_path, content)
        except OSError as exc:
            raise ChangelogNotFound(
                changelog_path, f"could not be written: {exc.strerror or exc}"
            ) from exc
        log_debug(f"wrote {len(content)} characters to {changelog_path}")

        report = self.store.delete_all(entry_paths)
        summary.deleted = report.deleted
        summary.failed_deletions = report.failed
        if report.complete:
            log_success(
                f"removed {len(report.deleted)} published entries from "
                f"{display_path(self.store.directory)}."
            )
        self._output.write(
            f"{display_path(changelog_path)} was updated. Congrats on the release!",
            style="bold green",
        )
        return summary

    def _read_changelog(self, path: Path) -> str:
        if not self._fs.is_file(path):
            raise ChangelogNotFound(path)
        if not self._fs.is_writable(path):
            raise ChangelogNotFound(path, "not writable")
        try:
            return self._fs.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise ChangelogNotFound(path, str(exc)) from exc

    def _read_header(self) -> Optional[str]:
        """Return the header file contents, or None when it cannot be used."""
        path = self.config.header_file
        if path is None:
            return None
        if not self._fs.is_file(path):
            log_debug(f"no changelog header at {path}, skipping")
            return None
        try:
            return self._fs.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            log_debug(f"could not read changelog header {path}: {exc}")
            return None

    def _check_single_anchor(
        self,
        content: str,
        path: Path,
        entries: list[Entry],
        header: Optional[str],
    ) -> None:
        """Refuse content that would carry the anchor more than once."""
        anchor = LATEST_RELEASE_ANCHOR
        if content.count(anchor) == 1:
            return
        sources = [
            str(entry.path) if entry.path is not None else "an entry"
            for entry in entries
            if anchor in entry.text
        ]
        if header is not None and anchor in header and self.config.header_file is not None:
            sources.append(str(self.config.header_file))
        if not sources:
            sources.append("the release heading")
        raise ReleaseAnchorConflict(path, anchor, sources)
