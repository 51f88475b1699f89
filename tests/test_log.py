"""Tests for recording new unreleased entries."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

import pytest

from changelog_generator.config import Config
from changelog_generator.entries import EntryType, parse_entry
from changelog_generator.errors import (
    ChangelogDirectoryNotFound,
    DirectoryNotFound,
    HelpRequested,
    NoTextEntered,
    UnknownEntryType,
)
from changelog_generator.log import EDITOR_HINT, LogEngine, bulleted_text, strip_comment_lines

from .conftest import RecordingOutput, ScriptedConfirmer, ScriptedEditor

ConfirmerFactory = Callable[[bool], ScriptedConfirmer]
EditorFactory = Callable[[Optional[str]], ScriptedEditor]


def _engine(
    config: Config,
    output: RecordingOutput,
    *,
    confirmer: Optional[ScriptedConfirmer] = None,
    editor: Optional[ScriptedEditor] = None,
) -> LogEngine:
    return LogEngine(
        config,
        confirmer=confirmer or ScriptedConfirmer(False),
        editor_runner=editor or ScriptedEditor(None),
        output=output,
    )


def test_bulleted_text_prefixes_every_line() -> None:
    assert bulleted_text(["one", "two"]) == "- one\n- two\n"


def test_strip_comment_lines_removes_whole_comment_lines_only() -> None:
    text = f"{EDITOR_HINT}\n\n  <!-- indented -->\nKeep <!-- inline --> this\n- bullet\n\n"
    assert strip_comment_lines(text) == "Keep <!-- inline --> this\n- bullet"


def test_text_arguments_become_bullets(
    project: Config, output: RecordingOutput, editor_factory: EditorFactory
) -> None:
    editor = editor_factory("unused")
    engine = _engine(project, output, editor=editor)

    path = engine.create_entry("add", ["Added a thing", "And another"])

    assert path.parent == project.unreleased_directory
    assert path.read_text(encoding="utf-8") == "### Added\n- Added a thing\n- And another\n"
    assert editor.calls == []
    assert "### Added\n- Added a thing\n- And another\n" in output.text
    assert any(message.startswith("Created changelog entry at") for message in output.messages)


def test_accepts_entry_type_members(project: Config, output: RecordingOutput) -> None:
    path = _engine(project, output).create_entry(EntryType.SECURITY, ["Patched it"])
    assert parse_entry(path.read_text(encoding="utf-8")).type is EntryType.SECURITY


def test_unknown_entry_type_is_rejected(project: Config, output: RecordingOutput) -> None:
    with pytest.raises(UnknownEntryType) as excinfo:
        _engine(project, output).create_entry("feature", ["nope"])
    assert excinfo.value.value == "feature"
    assert list(project.unreleased_directory.iterdir()) == []


@pytest.mark.parametrize(
    ("entry_type", "text"),
    [("help", ()), ("HELP", ("ignored",)), ("fix", ("help",))],
)
def test_help_is_not_an_entry(
    tmp_path: Path,
    project: Config,
    output: RecordingOutput,
    confirmer_factory: ConfirmerFactory,
    entry_type: str,
    text: tuple[str, ...],
) -> None:
    confirmer = confirmer_factory(True)
    config = replace(project, unreleased_directory=tmp_path / "absent")

    with pytest.raises(HelpRequested):
        _engine(config, output, confirmer=confirmer).create_entry(entry_type, text)

    assert confirmer.questions == []
    assert not (tmp_path / "absent").exists()


def test_help_inside_longer_text_is_ordinary_text(
    project: Config, output: RecordingOutput
) -> None:
    path = _engine(project, output).create_entry("fix", ["help", "page typo"])
    assert path.read_text(encoding="utf-8") == "### Fixed\n- help\n- page typo\n"


def test_missing_directory_is_created_after_confirmation(
    tmp_path: Path,
    project: Config,
    output: RecordingOutput,
    confirmer_factory: ConfirmerFactory,
) -> None:
    directory = tmp_path / "docs" / "changes"
    config = replace(project, unreleased_directory=directory)
    confirmer = confirmer_factory(True)

    path = _engine(config, output, confirmer=confirmer).create_entry("change", ["Renamed"])

    assert len(confirmer.questions) == 1
    assert "does not exist" in confirmer.questions[0]
    assert path.parent == directory
    assert path.is_file()


def test_declining_to_create_directory_aborts(
    tmp_path: Path,
    project: Config,
    output: RecordingOutput,
    confirmer_factory: ConfirmerFactory,
) -> None:
    directory = tmp_path / "docs" / "changes"
    config = replace(project, unreleased_directory=directory)

    with pytest.raises(ChangelogDirectoryNotFound) as excinfo:
        _engine(config, output, confirmer=confirmer_factory(False)).create_entry(
            "change", ["Renamed"]
        )

    assert isinstance(excinfo.value, DirectoryNotFound)
    assert excinfo.value.path == directory
    assert not directory.exists()


def test_existing_directory_needs_no_confirmation(
    project: Config, output: RecordingOutput, confirmer_factory: ConfirmerFactory
) -> None:
    confirmer = confirmer_factory(False)
    _engine(project, output, confirmer=confirmer).create_entry("remove", ["Dropped a flag"])
    assert confirmer.questions == []


def test_editor_contents_become_the_entry(
    project: Config, output: RecordingOutput, editor_factory: EditorFactory
) -> None:
    editor = editor_factory(
        f"{EDITOR_HINT}\nA paragraph describing the change.\n\n- with a bullet\n\n"
    )

    path = _engine(project, output, editor=editor).create_entry("deprecate", editor="nano")

    assert path.read_text(encoding="utf-8") == (
        "### Deprecated\nA paragraph describing the change.\n\n- with a bullet\n"
    )
    assert editor.initial_contents == [f"{EDITOR_HINT}\n"]
    [(buffer, chosen)] = editor.calls
    assert chosen == "nano"
    assert buffer.name == "entry.md"
    assert not buffer.parent.exists()


def test_configured_editor_is_used_by_default(
    project: Config, output: RecordingOutput, editor_factory: EditorFactory
) -> None:
    editor = editor_factory("- written in vim")
    config = replace(project, editor="vim")

    _engine(config, output, editor=editor).create_entry("add")

    assert editor.calls[0][1] == "vim"


@pytest.mark.parametrize("edited", [None, "", f"{EDITOR_HINT}\n", "<!-- only -->\n\n  \n"])
def test_empty_editor_result_writes_nothing(
    project: Config,
    output: RecordingOutput,
    editor_factory: EditorFactory,
    edited: Optional[str],
) -> None:
    editor = editor_factory(edited)

    with pytest.raises(NoTextEntered):
        _engine(project, output, editor=editor).create_entry("fix")

    assert list(project.unreleased_directory.iterdir()) == []
    assert not editor.calls[0][0].parent.exists()


def test_file_in_place_of_directory_is_reported(
    tmp_path: Path,
    project: Config,
    output: RecordingOutput,
    confirmer_factory: ConfirmerFactory,
) -> None:
    blocker = tmp_path / "pending"
    blocker.write_text("not a directory", encoding="utf-8")
    config = replace(project, unreleased_directory=blocker)

    with pytest.raises(DirectoryNotFound) as excinfo:
        _engine(config, output, confirmer=confirmer_factory(True)).create_entry(
            "fix", ["Something"]
        )

    assert excinfo.value.path == blocker
    assert excinfo.value.reason
    assert "Could not create the unreleased changelog directory" in excinfo.value.message
    assert blocker.read_text(encoding="utf-8") == "not a directory"
