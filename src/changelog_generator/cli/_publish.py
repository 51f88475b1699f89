"""Publish command for merging entries into the changelog."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from ..errors import EntryCleanupFailed
from ..publish import PublishOptions, PublishSummary
from ._core import CLIContext

__all__ = [
    "run_publish",
    "publish_cmd",
]


def run_publish(
    ctx: CLIContext,
    *,
    version: str,
    release_date: Optional[str] = None,
    dry_run: bool = False,
    changelog_file: Optional[Path] = None,
    header_file: Optional[Path] = None,
) -> PublishSummary:
    """Python wrapper around the ``publish`` command."""

    config = (
        ctx.ensure_config()
        .with_overrides(changelog_file=changelog_file, header_file=header_file)
        .anchored_at(ctx.project_root)
    )
    engine = ctx.publish_engine(config)
    return engine.publish(
        PublishOptions(version=version, release_date=release_date, dry_run=dry_run)
    )


@click.command("publish")
@click.argument("version")
@click.argument("release_date", required=False)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print the release section without touching the changelog or deleting entries.",
)
@click.option(
    "--changelog-filename",
    "changelog_file",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Changelog file that receives the release (default: CHANGELOG.md).",
)
@click.option(
    "--header",
    "header_file",
    type=click.Path(path_type=Path, dir_okay=False),
    help=(
        "Markdown file placed above the release anchor "
        "(default: changelogs/header.md; skipped when missing or unreadable)."
    ),
)
@click.pass_obj
def publish_cmd(
    ctx: CLIContext,
    version: str,
    release_date: Optional[str],
    dry_run: bool,
    changelog_file: Optional[Path],
    header_file: Optional[Path],
) -> None:
    """Collect unreleased entries and prepend them to the changelog as VERSION.

    RELEASE_DATE defaults to today (MM-DD-YYYY).
    """
    summary = run_publish(
        ctx,
        version=version,
        release_date=release_date,
        dry_run=dry_run,
        changelog_file=changelog_file,
        header_file=header_file,
    )
    if not summary.complete:
        raise EntryCleanupFailed(summary.failed_deletions)
