"""Find media files on disk and probe them into MediaItems."""

import hashlib
import logging
import os
import shutil
import tempfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from takesync import ffutil
from takesync.media import MediaItem
from takesync.models import MediaType

logger = logging.getLogger(__name__)


def media_paths(directories: Iterable[Path]) -> list[Path]:
    """Recursively list supported media files under each directory, sorted per directory."""
    paths: list[Path] = []
    for directory in directories:
        directory = Path(directory)
        if not directory.is_dir():
            logger.warning("Not a directory, skipping: %s", directory)
            continue
        found: list[Path] = []
        for root, _dirs, files in os.walk(directory):
            for name in files:
                path = Path(root) / name
                if MediaType.from_path(path) is not None and path.is_file():
                    found.append(path)
        paths.extend(sorted(found))
    return paths


def load_media_item(path: Path) -> MediaItem | None:
    metadata = ffutil.probe(path)
    if metadata is None:
        logger.info("Skipping %s: no usable metadata", path)
        return None
    return MediaItem.from_path(path, metadata)


def load_media_items(paths: list[Path], workers: int = 4) -> list[MediaItem]:
    """Probe *paths* in parallel; order follows *paths* and unreadable files are left out.

    FFprobeNotFoundError from any worker propagates and aborts the scan.
    """
    if not paths:
        return []
    with ThreadPoolExecutor(max_workers=max(1, min(workers, len(paths)))) as executor:
        items = list(executor.map(load_media_item, paths))
    return [item for item in items if item is not None]


def media_items(directories: Iterable[Path], workers: int = 4) -> list[MediaItem]:
    return load_media_items(media_paths(directories), workers=workers)


def tmp_path_for(item: MediaItem, root: Path | None = None) -> Path:
    """``<root>/<base name>/<source dir digest>/<file name>``.

    Recorders restart their numbering on every card, so the same file name
    turns up in several directories; the digest keeps their copies apart.
    """
    root = Path(root) if root is not None else Path(tempfile.gettempdir())
    parent = str(item.path.parent.absolute()).encode("utf-8", "surrogateescape")
    digest = hashlib.sha1(parent).hexdigest()[:8]
    return root / item.base_name / digest / item.name


def _same_file(source: Path, copy: Path) -> bool:
    """Whether *copy* still matches *source* by size and modification time."""
    try:
        src, dst = source.stat(), copy.stat()
    except OSError:
        return False
    return src.st_size == dst.st_size and int(src.st_mtime) == int(dst.st_mtime)


def copy_to_temp(item: MediaItem, root: Path | None = None) -> MediaItem | None:
    """Copy *item* under the temp dir (see ``tmp_path_for``) and return a freshly probed item for the copy.

    An existing copy is reused while its size and mtime match the source.
    Returns None if the copy cannot be made or probed.
    """
    target = tmp_path_for(item, root)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if not _same_file(item.path, target):
            logger.info("Copying %s to %s", item.name, target)
            shutil.copy2(item.path, target)
    except OSError as e:
        logger.info("Could not copy %s: %s", item.path, e)
        return None
    return load_media_item(target)
