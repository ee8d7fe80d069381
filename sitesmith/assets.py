"""Static asset mirroring for sitesmith.

Theme assets, content assets and the theme stylesheet are copied into the
output tree as-is. Copies are flat: only files directly inside the source
directory are mirrored.

Key functions:
- mirror_assets: Copy every file of a directory into another directory.
- copy_stylesheet: Copy the theme stylesheet into the output assets.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .config import STYLESHEET_NAME
from .errors import AssetError

logger = logging.getLogger(__name__)


def _replace_file(source: Path, dest: Path) -> None:
    """Copy source over dest, removing any existing file first."""
    try:
        if dest.exists() or dest.is_symlink():
            dest.unlink()
        shutil.copyfile(source, dest)
    except OSError as exc:
        raise AssetError(f"Could not copy to {dest}: {exc}", source, exc) from exc


def mirror_assets(source_dir: Path, dest_dir: Path) -> list[Path]:
    """Copy every non-directory entry of source_dir into dest_dir.

    Existing files in dest_dir with the same name are replaced, never
    appended to. Files in dest_dir without a counterpart are left alone.

    Args:
        source_dir: Directory to copy from.
        dest_dir: Directory to copy into; created if missing.

    Returns:
        Paths of the files written, in name order.

    Raises:
        AssetError: If source_dir does not exist or a copy fails.
    """
    if not source_dir.is_dir():
        raise AssetError("Asset directory does not exist", source_dir)
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise AssetError(f"Could not create {dest_dir}: {exc}", dest_dir, exc) from exc

    written: list[Path] = []
    for item in sorted(source_dir.iterdir()):
        if item.is_dir():
            continue
        dest = dest_dir / item.name
        _replace_file(item, dest)
        written.append(dest)
    logger.debug("Mirrored %d file(s) from %s", len(written), source_dir)
    return written


def copy_stylesheet(stylesheet: Path, dest_dir: Path) -> Path:
    """Copy the theme stylesheet to ``dest_dir/style.css``.

    Args:
        stylesheet: The theme's stylesheet file.
        dest_dir: Output assets directory; created if missing.

    Returns:
        Path of the copied stylesheet.

    Raises:
        AssetError: If the stylesheet is missing or cannot be copied.
    """
    if not stylesheet.is_file():
        raise AssetError("Theme stylesheet does not exist", stylesheet)
    dest_dir.mkdir(parents=True, exist_ok=True)
    dest = dest_dir / STYLESHEET_NAME
    _replace_file(stylesheet, dest)
    return dest
