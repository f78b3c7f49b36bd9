"""Path utilities: collision-free naming, file counting and volume detection."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from filedeck.shared.constants import FileSystem
from filedeck.shared.errors import (
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_file_not_found_error,
    wrap_os_error,
)

logger = logging.getLogger(__name__)


def _split_name(candidate: Path) -> tuple[str, str]:
    """Split into (stem, suffix); directories keep their whole name."""
    if candidate.is_dir() or not candidate.suffix:
        return candidate.name, ""
    return candidate.stem, candidate.suffix


def resolve_collision_free_name(candidate: str | Path) -> Path:
    """
    Return ``candidate`` if it does not exist, else the first free
    ``"<stem> (N)<suffix>"`` for N = 1, 2, ...

    The search is bounded by the number of entries already in the parent
    directory, so it always terminates.

    Raises:
        InfrastructureError: If the parent directory cannot be listed
    """
    candidate = Path(candidate)
    if not os.path.lexists(candidate):
        return candidate

    parent = candidate.parent
    stem, suffix = _split_name(candidate)
    try:
        existing = set(os.listdir(parent))
    except OSError as e:
        raise wrap_os_error(e, parent, "resolve_name", ErrorCode.NAME_RESOLUTION_FAILED) from e

    for counter in range(1, len(existing) + 2):
        name = f"{stem} ({counter}){suffix}"
        if name not in existing and not os.path.lexists(parent / name):
            return parent / name

    raise InfrastructureError(
        ErrorCode.NAME_RESOLUTION_FAILED,
        f"No free name found for {candidate}",
        ErrorContext(file_path=str(candidate), operation="resolve_name"),
    )


def count_files(path: str | Path) -> int:
    """
    Count the non-directory entries under ``path`` (``path`` itself if it
    is a file). Subdirectories that cannot be read are skipped and logged.

    Raises:
        InfrastructureError: If ``path`` does not exist
    """
    path = Path(path)
    if not os.path.lexists(path):
        raise create_file_not_found_error(path, operation="count_files")

    if path.is_symlink() or not path.is_dir():
        return 1

    def _on_error(error: OSError) -> None:
        logger.warning("Skipping unreadable entry while counting: %s", error)

    count = 0
    for root, dirs, files in os.walk(path, onerror=_on_error):
        count += len(files)
        # os.walk lists symlinks to directories under dirs without following them
        count += sum(1 for d in dirs if os.path.islink(os.path.join(root, d)))
    return count


def total_file_count(paths: list[Path]) -> int:
    """Sum ``count_files`` over ``paths``; missing paths contribute 0."""
    total = 0
    for item in paths:
        try:
            total += count_files(item)
        except InfrastructureError as e:
            logger.warning("Not counting %s: %s", item, e.message)
    return total


def _device_of(path: Path) -> int | None:
    """st_dev of ``path`` or of its nearest existing ancestor."""
    current = path.absolute()
    while True:
        try:
            return os.lstat(current).st_dev
        except OSError:
            if current.parent == current:
                return None
            current = current.parent


def is_external_volume(path: str | Path, trash_root: str | Path) -> bool:
    """
    Return True when ``path`` lives on a different device than the trash.

    Used to choose between trash relocation and permanent delete, and
    between rename and a content copy for cut-paste.
    """
    path_dev = _device_of(Path(path))
    trash_dev = _device_of(Path(trash_root))
    if path_dev is None or trash_dev is None:
        return False
    return path_dev != trash_dev


def same_device(source: str | Path, destination_dir: str | Path) -> bool:
    """Return True when a plain rename from ``source`` into ``destination_dir`` can work."""
    source_dev = _device_of(Path(source))
    dest_dev = _device_of(Path(destination_dir))
    return source_dev is not None and source_dev == dest_dev


def name_without_extension(path: str | Path) -> str:
    """Strip a known archive extension (``.tar.gz`` included) or the last suffix."""
    name = Path(path).name
    lowered = name.lower()
    for extension in FileSystem.ARCHIVE_EXTENSIONS:
        if lowered.endswith(extension) and len(name) > len(extension):
            return name[: -len(extension)]
    return Path(name).stem
