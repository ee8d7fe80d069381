"""Error kinds raised by sitesmith.

Every error carries a human-readable message and, where one is known, the
path of the file that caused it so the CLI can point the author at it.

Hierarchy:
- SitesmithError
  - BuildError: anything that aborts a single build.
    - ConfigurationError: a required directory or config value is missing.
    - FrontmatterError: a content file could not be parsed.
      - MetadataNotFoundError
      - MalformedMetadataError
      - MissingFieldError
    - RenderError: a theme template failed to execute.
    - AssetError: copying or writing a file failed.
  - WatchError: the filesystem watcher failed; fatal to the watch loop.
"""

from __future__ import annotations

from pathlib import Path


class SitesmithError(Exception):
    """Base error with optional file context.

    Attributes:
        message: Human-readable error message.
        source_path: Path to the file that caused the error, if known.
        original_error: The original exception that was caught, if any.
    """

    def __init__(
        self,
        message: str,
        source_path: Path | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.source_path = source_path
        self.original_error = original_error
        if source_path is not None:
            super().__init__(f"{source_path}: {message}")
        else:
            super().__init__(message)


class BuildError(SitesmithError):
    """Error that aborts a build."""


class ConfigurationError(BuildError):
    """A required directory or setting is missing."""


class FrontmatterError(BuildError):
    """A content file has unusable metadata."""


class MetadataNotFoundError(FrontmatterError):
    """The file has no opening or no closing metadata delimiter."""


class MalformedMetadataError(FrontmatterError):
    """A metadata line is not a single `key: value` pair."""


class MissingFieldError(FrontmatterError):
    """A required metadata field (title or date) is empty."""


class RenderError(BuildError):
    """A theme template failed to render."""


class AssetError(BuildError):
    """A file could not be copied or written."""


class WatchError(SitesmithError):
    """The filesystem watcher could not be started or stopped working."""
