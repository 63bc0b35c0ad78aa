"""Copying of co-located assets and static files."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, Iterator, List, Sequence, Tuple

from .errors import AssetCopyError
from .logging import get_logger

# Subdirectory of the static root -> suffixes published from it.
STATIC_GROUPS: Dict[str, Tuple[str, ...]] = {
    "scripts": (".js",),
    "styles": (".css",),
}

_LOGGER = get_logger("assets")


def copy_file(source: Path, destination: Path) -> Path:
    """Copy one file, creating parent directories as needed."""
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, destination)
    except OSError as exc:
        raise AssetCopyError(source, destination, exc) from exc
    return destination


def iter_files(root: Path, suffixes: Sequence[str]) -> Iterator[Path]:
    """Yield files below ``root`` with one of ``suffixes``, sorted by path."""
    if not root.is_dir():
        return
    wanted = {suffix.lower() for suffix in suffixes}
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in wanted:
            yield path


def publish_static(static_dir: Path, destination: Path) -> List[Path]:
    """Copy scripts and styles from the static root into ``destination``."""
    published: List[Path] = []
    for group, suffixes in STATIC_GROUPS.items():
        source_root = static_dir / group
        for path in iter_files(source_root, suffixes):
            target = destination / group / path.relative_to(source_root)
            copy_file(path, target)
            published.append(target)
    _LOGGER.debug("Published %d static file(s) from %s", len(published), static_dir)
    return published


__all__ = ["STATIC_GROUPS", "copy_file", "iter_files", "publish_static"]
