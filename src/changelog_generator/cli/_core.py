"""Core CLI infrastructure: context, the command group, and the entry point."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib.metadata import PackageNotFoundError, version as metadata_version
from pathlib import Path
from typing import Optional

import click

from .. import __version__ as package_version
from ..config import Config, load_project_config
from ..log import LogEngine
from ..publish import PublishEngine
from ..system import ClickConfirmer, ClickEditorRunner, ConsoleOutput, LocalFileSystem
from ..utils import abort_on_user_interrupt, configure_logging, log_debug

__all__ = [
    "CLIContext",
    "DEFAULT_COMMAND",
    "VERSION_FLAGS",
    "create_cli_context",
    "_create_cli_group",
    "_inject_default_command",
    "main",
]

VERSION_FLAGS = {"--version", "-V"}
HELP_FLAGS = {"--help", "-h"}
DEFAULT_COMMAND = "log"

# Group options that consume the following argument.
_GROUP_VALUE_OPTIONS = {"--directory", "-d", "--config"}


def _resolve_cli_version() -> str:
    try:
        return metadata_version("changelog-generator")
    except PackageNotFoundError:
        return package_version


@dataclass
class CLIContext:
    """Shared command context."""

    project_root: Path
    config_path: Optional[Path] = None
    directory: Optional[Path] = None
    _config: Optional[Config] = None

    def ensure_config(self) -> Config:
        if self._config is None:
            try:
                config = load_project_config(self.project_root, self.config_path)
            except (FileNotFoundError, ValueError) as error:
                raise click.ClickException(str(error)) from error
            config = config.with_overrides(unreleased_directory=self.directory)
            self._config = config.anchored_at(self.project_root)
            log_debug(f"unreleased entries: {self._config.unreleased_directory}")
            log_debug(f"changelog: {self._config.changelog_file}")
        return self._config

    def log_engine(self, config: Optional[Config] = None) -> LogEngine:
        return LogEngine(
            config or self.ensure_config(),
            fs=LocalFileSystem(),
            confirmer=ClickConfirmer(),
            editor_runner=ClickEditorRunner(),
            output=ConsoleOutput(),
        )

    def publish_engine(self, config: Optional[Config] = None) -> PublishEngine:
        return PublishEngine(
            config or self.ensure_config(),
            fs=LocalFileSystem(),
            output=ConsoleOutput(),
        )


def create_cli_context(
    *,
    root: Path | None = None,
    config: Optional[Path] = None,
    directory: Optional[Path] = None,
    debug: bool = False,
) -> CLIContext:
    """Return a CLIContext using the same resolution logic as the CLI entry point."""

    configure_logging(debug)
    project_root = (root or Path(".")).resolve()
    log_debug(f"resolved project root: {project_root}")
    if config is not None:
        log_debug(f"using config path: {config}")
    return CLIContext(project_root=project_root, config_path=config, directory=directory)


def _create_cli_group() -> click.Group:
    """Create the main CLI group. Called after all commands are defined."""

    @click.group(context_settings={"help_option_names": ["-h", "--help"]})
    @click.option(
        "--directory",
        "-d",
        type=click.Path(path_type=Path, file_okay=False),
        help="Directory where unreleased changelog entries are written to and read from.",
    )
    @click.option(
        "--config",
        type=click.Path(path_type=Path, dir_okay=False),
        help="Path to an explicit changelog config YAML file.",
    )
    @click.option(
        "--debug",
        "-D",
        is_flag=True,
        help="Enable debug logging.",
    )
    @click.pass_context
    def _cli(
        ctx: click.Context,
        directory: Optional[Path],
        config: Optional[Path],
        debug: bool,
    ) -> None:
        """Curbing cumbersome changelog conflicts.

        Records changelog entries as single files to avoid merge conflicts in
        version control. At release time, 'changelog publish' collects them
        into your changelog under a new version.
        """

        ctx.obj = create_cli_context(config=config, directory=directory, debug=debug)

    return click.version_option(version=_resolve_cli_version(), message="%(version)s")(_cli)


def _inject_default_command(args: list[str], commands: set[str]) -> list[str]:
    """Insert the default command before the first positional argument.

    Arguments are returned unchanged when they already name a command or
    when help is requested before any positional argument.
    """
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--":
            break
        if arg in HELP_FLAGS:
            return args
        if arg.startswith("-"):
            if arg in _GROUP_VALUE_OPTIONS:
                index += 1
            index += 1
            continue
        if arg in commands:
            return args
        break
    return args[:index] + [DEFAULT_COMMAND] + args[index:]


def _requests_version(args: list[str]) -> bool:
    """Return whether a version flag appears among the leading group options."""
    index = 0
    while index < len(args):
        arg = args[index]
        if arg == "--" or not arg.startswith("-"):
            return False
        if arg in VERSION_FLAGS:
            return True
        if arg in _GROUP_VALUE_OPTIONS:
            index += 1
        index += 1
    return False


def main(argv: list[str] | None = None) -> int:
    """Entry point for console_scripts."""
    # Import cli here to avoid circular import at module load time
    from . import cli

    args = list(argv) if argv is not None else list(sys.argv[1:])

    if _requests_version(args):
        click.echo(_resolve_cli_version())
        return 0

    args = _inject_default_command(args, set(cli.commands))

    try:
        result = cli.main(args=args, prog_name="changelog", standalone_mode=False)
    except click.ClickException as exc:
        exc.show(file=sys.stderr)
        exit_code = getattr(exc, "exit_code", 1)
        return exit_code if isinstance(exit_code, int) else 1
    except click.exceptions.Abort:
        click.echo("Aborted!", err=True)
        return 1
    except click.exceptions.Exit as exc:
        return exc.exit_code if isinstance(exc.exit_code, int) else 0
    except KeyboardInterrupt as exc:
        try:
            abort_on_user_interrupt(exc)
        except click.exceptions.Exit as exit_exc:
            exit_code = getattr(exit_exc, "exit_code", 130)
            return exit_code if isinstance(exit_code, int) else 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 0
    # Without standalone mode click returns the code of a handled Exit.
    return result if isinstance(result, int) else 0
