"""CLI package for changelog-generator.

This package contains the modular CLI implementation:
- _core.py: CLIContext, the command group, main entry point
- _log.py: log command for creating entries
- _publish.py: publish command for releasing entries
"""

from __future__ import annotations

from ._core import (
    CLIContext,
    DEFAULT_COMMAND,
    VERSION_FLAGS,
    create_cli_context,
    _create_cli_group,
    _inject_default_command,
    main,
)
from ._log import log_cmd, run_log
from ._publish import publish_cmd, run_publish

# Create the main CLI group
cli = _create_cli_group()

# Register all commands with the cli group
cli.add_command(log_cmd)
cli.add_command(publish_cmd)


__all__ = [
    "cli",
    "main",
    "CLIContext",
    "DEFAULT_COMMAND",
    "VERSION_FLAGS",
    "create_cli_context",
    "_inject_default_command",
    "log_cmd",
    "run_log",
    "publish_cmd",
    "run_publish",
]
