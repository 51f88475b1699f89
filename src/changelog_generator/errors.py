"""Error taxonomy for changelog-generator.

Every error is a ``click.ClickException`` so the CLI prints a single line and
exits with a non-zero status. Each error keeps the context a user needs to
fix the problem (paths, the expected anchor, valid values) as attributes for
Python callers.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import click

from .utils import join_with_conjunction


class ChangelogError(click.ClickException):
    """Base class for all user-facing changelog errors."""


class DirectoryNotFound(ChangelogError):
    def __init__(self, path: Path, reason: str | None = None) -> None:
        self.path = path
        self.reason = reason
        if reason:
            message = f"Could not create the unreleased changelog directory {path}: {reason}."
        else:
            message = (
                f"Unreleased changelog directory not found: {path}. "
                "Create it or pass --directory to point at an existing one."
            )
        super().__init__(message)


class ChangelogDirectoryNotFound(DirectoryNotFound):
    """The user declined to create a missing entry directory."""

    def __init__(self, path: Path) -> None:
        super().__init__(path)
        self.message = f"Unreleased changelog directory {path} does not exist and was not created."


class MalformedEntry(ChangelogError):
    def __init__(self, path: Path | None, reason: str) -> None:
        self.path = path
        self.reason = reason
        location = str(path) if path is not None else "<memory>"
        super().__init__(f"Malformed changelog entry at {location}: {reason}")


class NoEntriesFound(ChangelogError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"No unreleased changelog entries were found in {path}.")


class ChangelogNotFound(ChangelogError):
    def __init__(self, path: Path, reason: str | None = None) -> None:
        self.path = path
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Couldn't find the changelog at {path}{detail}.")


class ReleaseAnchorNotFound(ChangelogError):
    def __init__(self, path: Path | None, anchor: str, count: int = 0) -> None:
        self.path = path
        self.anchor = anchor
        self.count = count
        location = str(path) if path is not None else "the changelog"
        if count == 0:
            message = (
                f"Couldn't find the release anchor in {location}. "
                f"Add the line '{anchor}' right above your latest release."
            )
        else:
            message = (
                f"Found the release anchor '{anchor}' {count} times in {location}; "
                "it must appear exactly once."
            )
        super().__init__(message)


class ReleaseAnchorConflict(ChangelogError):
    """Published text would add a second release anchor to the changelog."""

    def __init__(self, path: Path, anchor: str, sources: Sequence[str]) -> None:
        self.path = path
        self.anchor = anchor
        self.sources = tuple(sources)
        offenders = join_with_conjunction(list(self.sources))
        super().__init__(
            f"The release anchor '{anchor}' may only appear once in {path}, but it also "
            f"occurs in {offenders}. Remove it there and publish again."
        )


class NoTextEntered(ChangelogError):
    def __init__(self) -> None:
        super().__init__("The changelog entry was empty; nothing was written.")


class UnknownEntryType(ChangelogError):
    def __init__(self, value: str, valid_values: Sequence[str]) -> None:
        self.value = value
        self.valid_values = tuple(valid_values)
        sentence = join_with_conjunction(list(self.valid_values))
        super().__init__(f"Unknown entry type '{value}'. Valid types are {sentence}.")


class HelpRequested(ChangelogError):
    """``help`` was passed where an entry type or text was expected."""

    def __init__(self) -> None:
        super().__init__(
            "'help' is not a changelog entry. Did you mean 'changelog --help' "
            "or 'changelog log --help'?"
        )


class MissingVersion(ChangelogError):
    def __init__(self) -> None:
        super().__init__("A non-empty release version is required.")


class EntryCleanupFailed(ChangelogError):
    """The changelog was written but some consumed entries remain on disk."""

    def __init__(self, failures: Sequence[tuple[Path, str]]) -> None:
        self.failures = tuple(failures)
        paths = ", ".join(str(path) for path, _ in self.failures)
        super().__init__(
            f"The changelog was updated, but {len(self.failures)} published "
            f"entries could not be deleted: {paths}. Remove them manually."
        )
