"""Frontmatter parsing for sitesmith.

A content file looks like::

    ---
    title: "Hello"
    date: 2024-01-01
    cover_image: https://example.com/cover.png
    ---
    # Markdown body

The metadata block is read by a small line scanner with three states
(before, inside and after the frontmatter). Each ``---`` delimiter line moves
it to the next state. Everything after the closing delimiter is the body,
which is rendered to sanitized HTML.

Key functions:
- scan_frontmatter: Split text into a metadata dict and the body text.
- parse_post: Turn raw file bytes into a Post.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from .content import Post
from .errors import (
    FrontmatterError,
    MalformedMetadataError,
    MetadataNotFoundError,
    MissingFieldError,
    RenderError,
)
from .renderers import render_markdown
from .utils import unquote

DELIMITER = "---"
SEPARATOR = ":"

# Keys whose values are URLs and may themselves contain the separator.
URL_FIELDS = frozenset({"author_image", "authorImg", "cover_image"})

# Metadata key -> Post field.
FIELD_NAMES = {
    "title": "title",
    "date": "date",
    "author": "author",
    "description": "description",
    "author_image": "author_image",
    "authorImg": "author_image",
    "cover_image": "cover_image",
}

REQUIRED_FIELDS = ("title", "date")

# Fields that make up the output file name.
LINK_FIELDS = ("date", "title")
PATH_SEPARATORS = ("/", "\\")


class ScanState(Enum):
    BEFORE_FRONTMATTER = "before"
    IN_FRONTMATTER = "frontmatter"
    IN_BODY = "body"


def _split_metadata_line(line: str, source: Path | None) -> tuple[str, str]:
    """Split ``key: value`` into its parts.

    A line must contain exactly one separator. URL-valued keys are the
    exception: when the text before the first separator names one of them,
    the rest of the line is the value, separators and all.
    """
    key, sep, value = line.partition(SEPARATOR)
    key = key.strip()
    if not sep or (SEPARATOR in value and key not in URL_FIELDS):
        raise MalformedMetadataError(
            f"Metadata line is not a single 'key: value' pair: {line!r}", source
        )
    return key, unquote(value.strip())


def scan_frontmatter(
    text: str, source: Path | None = None
) -> tuple[dict[str, str], str]:
    """Split a content file into metadata and body.

    Args:
        text: Full file content.
        source: Path used in error messages only.

    Returns:
        Tuple of (metadata keyed by the names used in the file, body text).

    Raises:
        MetadataNotFoundError: If the opening or closing delimiter is missing.
        MalformedMetadataError: If a metadata line cannot be split.
    """
    lines = text.splitlines(keepends=True)
    state = ScanState.BEFORE_FRONTMATTER
    metadata: dict[str, str] = {}
    body_start = len(lines)

    for index, raw in enumerate(lines):
        line = raw.rstrip()
        if state is ScanState.BEFORE_FRONTMATTER:
            if line == DELIMITER:
                state = ScanState.IN_FRONTMATTER
            elif line:
                break
            continue
        if line == DELIMITER:
            state = ScanState.IN_BODY
            body_start = index + 1
            break
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        key, value = _split_metadata_line(line, source)
        metadata[key] = value

    if state is not ScanState.IN_BODY:
        raise MetadataNotFoundError("metadata not found", source)
    return metadata, "".join(lines[body_start:])


def parse_post(raw: bytes | str, source: Path | None = None) -> Post:
    """Parse a content file into a Post.

    The result depends only on the input: no clock, no filesystem access.

    Args:
        raw: File content as bytes (UTF-8) or text.
        source: Path of the file, recorded on the Post and in errors.

    Returns:
        Post with content rendered from the body only.

    Raises:
        FrontmatterError: If the metadata is missing, malformed or incomplete,
            or if the title or date would escape the posts directory.
        RenderError: If the Markdown body cannot be rendered.
    """
    if isinstance(raw, bytes):
        try:
            text = raw.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise FrontmatterError(f"File is not valid UTF-8: {exc}", source, exc) from exc
    else:
        text = raw
    metadata, body = scan_frontmatter(text, source)

    values: dict[str, str] = {}
    for key, value in metadata.items():
        field_name = FIELD_NAMES.get(key)
        if field_name is not None:
            values[field_name] = value

    for name in REQUIRED_FIELDS:
        if not values.get(name):
            raise MissingFieldError(f"Missing required metadata field: {name}", source)
    for name in LINK_FIELDS:
        if any(sep in values[name] for sep in PATH_SEPARATORS):
            raise FrontmatterError(
                f"Field '{name}' must not contain a path separator: {values[name]!r}",
                source,
            )

    try:
        content = render_markdown(body)
    except Exception as exc:
        raise RenderError(f"Could not render Markdown: {exc}", source, exc) from exc

    return Post(
        title=values["title"],
        date=values["date"],
        author=values.get("author", ""),
        author_image=values.get("author_image", ""),
        description=values.get("description", ""),
        cover_image=values.get("cover_image", ""),
        body=body,
        content=content,
        source=source,
    )
