"""
Archive adapter: extraction and zip compression.

Extraction dispatches on the file extension: zip containers take a
dedicated path through ``zipfile``; tar archives (optionally gzip, bzip2
or xz compressed) and single compressed files take the generic path.
An entry-level failure aborts the whole extraction; entries written
before the failure are left in place. Symlinks are archived as link
entries and restored as links.
"""

from __future__ import annotations

import bz2
import gzip
import logging
import lzma
import os
import shutil
import stat
import tarfile
import time
import zipfile
from collections.abc import Callable
from pathlib import Path

from filedeck.core.paths import name_without_extension
from filedeck.shared.constants import FileSystem
from filedeck.shared.errors import ArchiveError, ErrorCode, ErrorContext
from filedeck.shared.logging import log_error

logger = logging.getLogger(__name__)

EntryCallback = Callable[[str], None]

_SINGLE_FILE_OPENERS = {
    ".gz": gzip.open,
    ".bz2": bz2.open,
    ".xz": lzma.open,
}


def _archive_error(
    code: ErrorCode,
    message: str,
    path: Path,
    operation: str,
    original_error: Exception | None = None,
) -> ArchiveError:
    return ArchiveError(code, message, ErrorContext(file_path=str(path), operation=operation), original_error)


def _is_within(base: Path, target: Path) -> bool:
    base = base.resolve()
    try:
        target.resolve().relative_to(base)
    except ValueError:
        return False
    return True


def _is_tar_name(source: Path) -> bool:
    lowered = source.name.lower()
    return any(
        lowered.endswith(ext) for ext in FileSystem.ARCHIVE_EXTENSIONS if ext != FileSystem.ZIP_EXTENSION
    )


def count_entries(source: str | Path) -> int:
    """Number of entries ``extract`` will report for ``source``.

    Raises:
        ArchiveError: If the archive cannot be read
    """
    source = Path(source)
    try:
        if source.suffix.lower() == FileSystem.ZIP_EXTENSION:
            with zipfile.ZipFile(source) as archive:
                return len(archive.infolist())
        if _is_tar_name(source) or tarfile.is_tarfile(source):
            with tarfile.open(source) as archive:
                return len(archive.getmembers())
    except (OSError, zipfile.BadZipFile, tarfile.TarError, EOFError) as e:
        raise _archive_error(
            ErrorCode.ARCHIVE_EXTRACT_FAILED,
            f"Cannot read archive {source}: {e}",
            source,
            "extract",
            e,
        ) from e
    return 1


def extract(
    source_archive: str | Path,
    dest_dir: str | Path,
    on_entry: EntryCallback | None = None,
) -> None:
    """
    Extract ``source_archive`` into ``dest_dir``, creating it first.

    Args:
        source_archive: Archive to extract
        dest_dir: Destination directory (the caller makes it collision-free)
        on_entry: Called with each entry name once it is written

    Raises:
        ArchiveError: Unsupported format, unsafe entry or I/O failure
    """
    source = Path(source_archive)
    destination = Path(dest_dir)
    if not source.is_file():
        raise _archive_error(ErrorCode.FILE_NOT_FOUND, f"Archive not found: {source}", source, "extract")

    try:
        destination.mkdir(mode=FileSystem.DIRECTORY_MODE, parents=True, exist_ok=True)
        if source.suffix.lower() == FileSystem.ZIP_EXTENSION:
            _extract_zip(source, destination, on_entry)
        else:
            _extract_generic(source, destination, on_entry)
    except ArchiveError:
        raise
    except (OSError, zipfile.BadZipFile, tarfile.TarError, EOFError, lzma.LZMAError) as e:
        raise _archive_error(
            ErrorCode.ARCHIVE_EXTRACT_FAILED,
            f"Failed to extract {source}: {e}",
            source,
            "extract",
            e,
        ) from e
    logger.debug("Extracted %s into %s", source, destination)


def _extract_zip(source: Path, destination: Path, on_entry: EntryCallback | None) -> None:
    with zipfile.ZipFile(source) as archive:
        for info in archive.infolist():
            target = destination / info.filename
            if not _is_within(destination, target):
                raise _archive_error(
                    ErrorCode.ARCHIVE_UNSAFE_ENTRY,
                    f"Entry escapes the destination: {info.filename}",
                    source,
                    "extract",
                )
            if info.is_dir():
                target.mkdir(mode=FileSystem.DIRECTORY_MODE, parents=True, exist_ok=True)
            elif _is_symlink_entry(info):
                link_target = archive.read(info).decode("utf-8", "surrogateescape")
                if os.path.isabs(link_target) or not _is_within(destination, target.parent / link_target):
                    raise _archive_error(
                        ErrorCode.ARCHIVE_UNSAFE_ENTRY,
                        f"Link points outside the destination: {info.filename} -> {link_target}",
                        source,
                        "extract",
                    )
                target.parent.mkdir(mode=FileSystem.DIRECTORY_MODE, parents=True, exist_ok=True)
                os.symlink(link_target, target)
            else:
                target.parent.mkdir(mode=FileSystem.DIRECTORY_MODE, parents=True, exist_ok=True)
                with archive.open(info) as src, open(target, "wb") as dst:
                    shutil.copyfileobj(src, dst)
            if on_entry is not None:
                on_entry(info.filename)


def _extract_generic(source: Path, destination: Path, on_entry: EntryCallback | None) -> None:
    if _is_tar_name(source) or tarfile.is_tarfile(source):
        with tarfile.open(source) as archive:
            for member in archive.getmembers():
                if not _is_within(destination, destination / member.name):
                    raise _archive_error(
                        ErrorCode.ARCHIVE_UNSAFE_ENTRY,
                        f"Entry escapes the destination: {member.name}",
                        source,
                        "extract",
                    )
                archive.extract(member, destination, filter="data")
                if on_entry is not None:
                    on_entry(member.name)
        return

    opener = _SINGLE_FILE_OPENERS.get(source.suffix.lower())
    if opener is None:
        raise _archive_error(
            ErrorCode.ARCHIVE_UNSUPPORTED_FORMAT,
            f"Unsupported archive format: {source.name}",
            source,
            "extract",
        )
    target = destination / source.stem
    with opener(source, "rb") as src, open(target, "wb") as dst:
        shutil.copyfileobj(src, dst)
    if on_entry is not None:
        on_entry(target.name)


def default_zip_name(source: str | Path) -> Path:
    """``<dir>/<name without extension>.zip`` next to ``source``."""
    source = Path(source)
    return source.parent / f"{name_without_extension(source)}{FileSystem.ZIP_EXTENSION}"


def _is_symlink_entry(info: zipfile.ZipInfo) -> bool:
    return stat.S_ISLNK(info.external_attr >> 16)


def _write_entry(archive: zipfile.ZipFile, path: Path, arcname: str) -> None:
    if not path.is_symlink():
        archive.write(path, arcname)
        return
    # Link entry holding its target, as Info-ZIP zip -y stores it.
    info = zipfile.ZipInfo(arcname, date_time=time.localtime(path.lstat().st_mtime)[:6])
    info.create_system = 3
    info.external_attr = (stat.S_IFLNK | 0o777) << 16
    archive.writestr(info, os.readlink(path))


def compress(
    source_path: str | Path,
    dest_zip_path: str | Path,
    on_file: EntryCallback | None = None,
) -> None:
    """
    Write a zip archive containing ``source_path`` (recursively for directories).

    Entries are stored relative to the parent of ``source_path`` so the
    archive unpacks into a folder of the same name. A partially written
    archive is removed on failure.

    Raises:
        ArchiveError: If the source is missing or writing fails
    """
    source = Path(source_path)
    destination = Path(dest_zip_path)
    if not os.path.lexists(source):
        raise _archive_error(ErrorCode.FILE_NOT_FOUND, f"File not found: {source}", source, "compress")

    base = source.parent
    try:
        with zipfile.ZipFile(destination, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            if source.is_dir() and not source.is_symlink():
                for root, dirs, files in os.walk(source):
                    root_path = Path(root)
                    # os.walk lists symlinks to directories under dirs without following them
                    links = [d for d in dirs if (root_path / d).is_symlink()]
                    dirs[:] = sorted(d for d in dirs if d not in links)
                    if not dirs and not files and not links:
                        archive.write(root_path, root_path.relative_to(base).as_posix() + "/")
                    for name in sorted(files + links):
                        entry = root_path / name
                        if not entry.is_symlink() and entry.resolve() == destination.resolve():
                            continue
                        arcname = entry.relative_to(base).as_posix()
                        _write_entry(archive, entry, arcname)
                        if on_file is not None:
                            on_file(arcname)
            else:
                _write_entry(archive, source, source.name)
                if on_file is not None:
                    on_file(source.name)
    except (OSError, zipfile.LargeZipFile) as e:
        try:
            destination.unlink(missing_ok=True)
        except OSError as cleanup_error:
            log_error(f"Removing partial archive {destination}", cleanup_error, logger)
        raise _archive_error(
            ErrorCode.ARCHIVE_COMPRESS_FAILED,
            f"Failed to compress {source}: {e}",
            source,
            "compress",
            e,
        ) from e
    logger.debug("Compressed %s into %s", source, destination)
