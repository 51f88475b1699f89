"""Python-friendly facade for invoking changelog-generator functionality."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from .cli import CLIContext, create_cli_context, run_log, run_publish
from .entries import Entry, EntryType
from .publish import PublishSummary


class Changelog:
    """High-level helper that mirrors the CLI commands for Python callers."""

    def __init__(
        self,
        *,
        root: Path | str | None = None,
        directory: Path | str | None = None,
        config: Path | str | None = None,
        debug: bool = False,
    ) -> None:
        self._ctx = create_cli_context(
            root=Path(root) if root is not None else None,
            config=Path(config) if config is not None else None,
            directory=Path(directory) if directory is not None else None,
            debug=debug,
        )

    @property
    def context(self) -> CLIContext:
        """Expose the underlying CLIContext for advanced scenarios."""

        return self._ctx

    def log(
        self,
        entry_type: EntryType | str,
        text: Sequence[str],
        *,
        editor: Optional[str] = None,
    ) -> Path:
        """Create an entry from bullet lines and return the resulting file path.

        Pass an empty ``text`` to compose the entry in an editor instead.
        """

        return run_log(self._ctx, entry_type=entry_type, text=text, editor=editor)

    def pending(self) -> list[Entry]:
        """Return the unreleased entries in publish order."""

        return self._ctx.publish_engine().store.load_all()

    def publish(
        self,
        version: str,
        *,
        release_date: Optional[str] = None,
        dry_run: bool = False,
        changelog: Path | str | None = None,
        header: Path | str | None = None,
    ) -> PublishSummary:
        """Publish all unreleased entries as ``version``.

        Args:
            version: Version label for the release heading.
            release_date: Date label; defaults to today as MM-DD-YYYY.
            dry_run: Compute and print the release without writing anything.
            changelog: Changelog file overriding the configured one.
            header: Header file overriding the configured one.

        Returns:
            The publish summary, including any entry files that could not be
            deleted after the changelog was written.
        """

        return run_publish(
            self._ctx,
            version=version,
            release_date=release_date,
            dry_run=dry_run,
            changelog_file=Path(changelog) if changelog is not None else None,
            header_file=Path(header) if header is not None else None,
        )
