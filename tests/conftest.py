"""Shared fixtures and collaborator fakes for the test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from changelog_generator.config import Config
from changelog_generator.system import LocalFileSystem
from changelog_generator.utils import configure_logging

ANCHOR = "<!--Latest Release-->"


class RecordingOutput:
    """OutputSink that keeps everything written to it."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def write(self, text: str, *, style: Optional[str] = None) -> None:
        self.messages.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.messages)


class ScriptedConfirmer:
    """Confirmer that answers every question the same way."""

    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.questions: list[str] = []

    def confirm(self, question: str) -> bool:
        self.questions.append(question)
        return self.answer


class ScriptedEditor:
    """EditorRunner that replaces the buffer with fixed text."""

    def __init__(self, text: Optional[str]) -> None:
        self.text = text
        self.calls: list[tuple[Path, Optional[str]]] = []
        self.initial_contents: list[str] = []

    def edit(self, path: Path, editor: Optional[str] = None) -> None:
        self.calls.append((path, editor))
        self.initial_contents.append(path.read_text(encoding="utf-8"))
        if self.text is not None:
            path.write_text(self.text, encoding="utf-8")


class FlakyRemoveFileSystem(LocalFileSystem):
    """Local filesystem whose ``remove`` fails for selected file names."""

    def __init__(self, failing_names: set[str]) -> None:
        self.failing_names = failing_names
        self.replaced: list[Path] = []

    def remove(self, path: Path) -> None:
        if path.name in self.failing_names:
            raise PermissionError(13, "Permission denied", str(path))
        super().remove(path)

    def replace_file(self, path: Path, content: str) -> None:
        self.replaced.append(path)
        super().replace_file(path, content)


@pytest.fixture(autouse=True)
def _fresh_logging() -> None:
    """Rebind the shared logger to the stderr stream of the current test."""
    configure_logging()


@pytest.fixture
def output() -> RecordingOutput:
    return RecordingOutput()


@pytest.fixture
def project(tmp_path: Path) -> Config:
    """A project with an empty entry directory and a changelog holding one release."""
    entries_dir = tmp_path / "changelogs" / "unreleased"
    entries_dir.mkdir(parents=True)
    changelog = tmp_path / "CHANGELOG.md"
    changelog.write_text(f"{ANCHOR}\n## [1.0] - 01-01-2020\nOld content\n", encoding="utf-8")
    return Config(
        unreleased_directory=entries_dir,
        changelog_file=changelog,
        header_file=tmp_path / "changelogs" / "header.md",
    )


@pytest.fixture
def write_entry_file(project: Config) -> Callable[[str, str], Path]:
    """Write a raw entry file into the project's unreleased directory."""

    def _write(name: str, content: str) -> Path:
        path = project.unreleased_directory / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def confirmer_factory() -> Callable[[bool], ScriptedConfirmer]:
    return ScriptedConfirmer


@pytest.fixture
def editor_factory() -> Callable[[Optional[str]], ScriptedEditor]:
    return ScriptedEditor


@pytest.fixture
def flaky_fs_factory() -> Callable[[set[str]], FlakyRemoveFileSystem]:
    return FlakyRemoveFileSystem
