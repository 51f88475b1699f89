"""Configuration helpers for changelog-generator."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, MutableMapping, Optional

import yaml

CONFIG_FILENAME = ".changelog.yaml"
DEFAULT_UNRELEASED_DIRECTORY = Path("changelogs/unreleased")
DEFAULT_CHANGELOG_FILE = Path("CHANGELOG.md")
DEFAULT_HEADER_FILE = Path("changelogs/header.md")

_KNOWN_KEYS = ("directory", "changelog", "header", "editor")


@dataclass(frozen=True)
class Config:
    """Settings shared by the log and publish workflows."""

    unreleased_directory: Path = DEFAULT_UNRELEASED_DIRECTORY
    changelog_file: Path = DEFAULT_CHANGELOG_FILE
    header_file: Optional[Path] = DEFAULT_HEADER_FILE
    editor: Optional[str] = None

    def with_overrides(
        self,
        *,
        unreleased_directory: Optional[Path] = None,
        changelog_file: Optional[Path] = None,
        header_file: Optional[Path] = None,
        editor: Optional[str] = None,
    ) -> Config:
        """Return a copy with every non-None argument applied."""
        changes: dict[str, Any] = {}
        if unreleased_directory is not None:
            changes["unreleased_directory"] = unreleased_directory
        if changelog_file is not None:
            changes["changelog_file"] = changelog_file
        if header_file is not None:
            changes["header_file"] = header_file
        if editor is not None:
            changes["editor"] = editor
        return replace(self, **changes) if changes else self

    def anchored_at(self, root: Path) -> Config:
        """Return a copy whose relative paths are resolved against ``root``."""

        def _anchor(path: Path) -> Path:
            return path if path.is_absolute() else root / path

        return replace(
            self,
            unreleased_directory=_anchor(self.unreleased_directory),
            changelog_file=_anchor(self.changelog_file),
            header_file=_anchor(self.header_file) if self.header_file is not None else None,
        )


def default_config_path(project_root: Path) -> Path:
    """Return the default config path for a project root."""
    return project_root / CONFIG_FILENAME


def _optional_string(raw: MutableMapping[str, Any], key: str) -> Optional[str]:
    value = raw.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"Config option '{key}' must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"Config option '{key}' must not be empty.")
    return stripped


def _resolve(base: Path, value: Optional[str]) -> Optional[Path]:
    if value is None:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


def load_config(path: Path) -> Config:
    """Load the configuration from disk.

    Relative paths are resolved against the directory holding the file.
    """
    with path.open("r", encoding="utf-8") as handle:
        raw = yaml.safe_load(handle) or {}
    if not isinstance(raw, MutableMapping):
        raise ValueError(f"Config root in {path} must be a mapping")

    unknown = sorted(str(key) for key in raw if key not in _KNOWN_KEYS)
    if unknown:
        allowed = ", ".join(_KNOWN_KEYS)
        raise ValueError(
            f"Unknown config option(s) in {path}: {', '.join(unknown)}. Allowed options: {allowed}"
        )

    base = path.parent
    config = Config()
    header: Optional[str] = None
    if "header" in raw and raw["header"] in (None, False):
        # An explicit null or false disables header injection.
        config = replace(config, header_file=None)
    else:
        header = _optional_string(raw, "header")
    return config.with_overrides(
        unreleased_directory=_resolve(base, _optional_string(raw, "directory")),
        changelog_file=_resolve(base, _optional_string(raw, "changelog")),
        header_file=_resolve(base, header),
        editor=_optional_string(raw, "editor"),
    )


def load_project_config(project_root: Path, config_path: Optional[Path] = None) -> Config:
    """Load an explicit config file, the project's default file, or defaults."""
    if config_path is not None:
        if not config_path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return load_config(config_path)
    default_path = default_config_path(project_root)
    if default_path.is_file():
        return load_config(default_path)
    return Config()

