"""Utility functions for sitesmith.

Key functions:
    post_link: Derive the output filename of a post from its date and title.
    unquote: Strip one pair of surrounding quotes from a metadata value.
    is_markdown: Check if a path is a content file.
    ensure_dir: Create a directory (and parents) if missing.
    write_atomic: Write text to a file via a temporary file and rename.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

MARKDOWN_SUFFIXES = (".md", ".markdown")


def post_link(date: str, title: str) -> str:
    """Return the output filename for a post.

    Two posts with the same date and title map to the same link; the one
    written last wins.

    Args:
        date: Canonical date string (YYYY-MM-DD).
        title: Post title.

    Returns:
        Filename like ``2024-01-01-Hello_World.html``.

    Examples:
        >>> post_link("2024-01-01", "Hello World")
        '2024-01-01-Hello_World.html'
    """
    return f"{date}-{title.replace(' ', '_')}.html"


def unquote(value: str) -> str:
    """Remove a single pair of matching surrounding quotes.

    Examples:
        >>> unquote('"Hello"')
        'Hello'

        >>> unquote("it's")
        "it's"
    """
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def is_markdown(path: Path) -> bool:
    """Check if a path is a Markdown content file.

    Args:
        path: Path to check.

    Returns:
        True if the file has a .md or .markdown extension (case-insensitive).
    """
    return path.suffix.lower() in MARKDOWN_SUFFIXES


def ensure_dir(path: Path) -> Path:
    """Create a directory and its parents; existing directories are fine."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_atomic(path: Path, text: str) -> None:
    """Write text to path without ever exposing a partially written file.

    The content goes to a temporary file in the same directory which then
    replaces the target in one rename.

    Args:
        path: Destination file.
        text: Content to write (UTF-8).
    """
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
