"""Anchor-based editing of the changelog document.

A changelog managed by this tool looks like::

    <optional header>
    <!--Latest Release-->
    ## [2.0] - 02-02-2021
    ...

Everything after the anchor is release history and is preserved verbatim.
Everything up to and including the anchor is regenerated on each publish.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .entries import Entry, EntryType
from .errors import ReleaseAnchorNotFound

LATEST_RELEASE_ANCHOR = "<!--Latest Release-->"


@dataclass(frozen=True)
class SplitDocument:
    """A changelog split around its release anchor."""

    header: str
    body: str


def split_at_anchor(
    content: str,
    *,
    anchor: str = LATEST_RELEASE_ANCHOR,
    path: Optional[Path] = None,
) -> SplitDocument:
    """Split content into the text before the anchor and the history after it.

    The anchor must occur exactly once. The newline that ends the anchor line
    belongs to neither part.
    """
    count = content.count(anchor)
    if count != 1:
        raise ReleaseAnchorNotFound(path, anchor, count)
    header, _, body = content.partition(anchor)
    if body.startswith("\r\n"):
        body = body[2:]
    elif body.startswith("\n"):
        body = body[1:]
    return SplitDocument(header=header, body=body)


def render_release_section(
    version: str,
    release_date: str,
    grouped: Mapping[EntryType, Sequence[Entry]],
) -> str:
    """Render the heading and category sections for a new release.

    Categories appear in canonical type order no matter how ``grouped`` is
    ordered; empty categories are skipped.
    """
    parts = [f"## [{version}] - {release_date}"]
    for entry_type in sorted(grouped):
        entries = grouped[entry_type]
        if not entries:
            continue
        texts = "\n".join(entry.text.rstrip("\r\n") for entry in entries)
        parts.append(f"\n\n### {entry_type.title}\n{texts}")
    return "".join(parts)


def compose_document(
    section: str,
    body: str,
    *,
    header: Optional[str] = None,
    anchor: str = LATEST_RELEASE_ANCHOR,
) -> str:
    """Assemble the header, anchor, new release section, and old history."""
    prefix = header or ""
    if prefix and not prefix.endswith("\n"):
        prefix += "\n"
    return f"{prefix}{anchor}\n{section}\n\n{body}"
