"""
Trash adapter.

On platforms with a native recycle facility (macOS, Windows) trashing is
delegated to send2trash. Elsewhere the freedesktop.org trash
layout is implemented directly: the item is renamed into
``<trash>/files/`` and a ``<name>.trashinfo`` sidecar recording the
original absolute path and the deletion time is written into
``<trash>/info/``.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path
from urllib.parse import quote

from send2trash import send2trash

from filedeck.config.models import TrashSettings
from filedeck.shared.constants import TrashLayout
from filedeck.shared.errors import ErrorCode, ErrorContext, TrashError
from filedeck.shared.logging import log_error, log_file_operation

logger = logging.getLogger(__name__)


def _trash_error(
    code: ErrorCode,
    message: str,
    path: Path,
    operation: str,
    original_error: Exception | None = None,
) -> TrashError:
    return TrashError(code, message, ErrorContext(file_path=str(path), operation=operation), original_error)


def _remove_path(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def format_trash_info(original_path: Path, deleted_at: datetime) -> str:
    """Render the body of a ``.trashinfo`` file."""
    return (
        f"{TrashLayout.INFO_HEADER}\n"
        f"Path={quote(str(original_path))}\n"
        f"DeletionDate={deleted_at.strftime(TrashLayout.DATE_FORMAT)}\n"
    )


class TrashAdapter:
    """Move-to-trash and permanent delete.

    Args:
        settings: Trash location and native facility switch
        platform: ``sys.platform`` value used to pick the native path
    """

    def __init__(self, settings: TrashSettings | None = None, platform: str | None = None) -> None:
        self.settings = settings or TrashSettings()
        self.platform = platform or sys.platform

    @property
    def trash_root(self) -> Path:
        return self.settings.trash_root

    @property
    def uses_native_trash(self) -> bool:
        return self.settings.use_native and self.platform in TrashLayout.NATIVE_PLATFORMS

    def ensure_directories(self) -> None:
        """Create ``files/`` and ``info/`` under the trash root.

        Raises:
            TrashError: If the directories cannot be created
        """
        if self.uses_native_trash:
            return
        for directory in (self.settings.files_dir, self.settings.info_dir):
            try:
                directory.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise _trash_error(
                    ErrorCode.TRASH_NOT_WRITABLE,
                    f"Cannot create trash directory {directory}: {e}",
                    directory,
                    "ensure_trash",
                    e,
                ) from e

    def move_to_trash(self, path: str | Path) -> Path | None:
        """
        Relocate ``path`` into the trash.

        Either the move fully succeeds or the source is left untouched.

        Returns:
            Location inside ``files/`` (None when the native facility was used)

        Raises:
            TrashError: Source missing, trash not writable, or the move failed
        """
        source = Path(path).absolute()
        if not os.path.lexists(source):
            raise _trash_error(ErrorCode.FILE_NOT_FOUND, f"File not found: {source}", source, "trash")

        if self.uses_native_trash:
            try:
                send2trash(str(source))
            except OSError as e:
                raise _trash_error(
                    ErrorCode.TRASH_MOVE_FAILED,
                    f"Native trash failed for {source}: {e}",
                    source,
                    "trash",
                    e,
                ) from e
            log_file_operation(logger, "trash", source)
            return None

        self.ensure_directories()
        if not os.access(self.settings.files_dir, os.W_OK) or not os.access(self.settings.info_dir, os.W_OK):
            raise _trash_error(
                ErrorCode.TRASH_NOT_WRITABLE,
                f"Trash directory is not writable: {self.trash_root}",
                self.trash_root,
                "trash",
            )

        destination, info_path = self._reserve_info(source)
        try:
            self._relocate(source, destination)
        except OSError as e:
            # Keep the sidecar when the content already reached files/.
            if not os.path.lexists(destination):
                self._discard(info_path)
            raise _trash_error(
                ErrorCode.TRASH_MOVE_FAILED,
                f"Failed to move {source} to trash: {e}",
                source,
                "trash",
                e,
            ) from e

        log_file_operation(logger, "trash", source, destination)
        return destination

    def _reserve_info(self, source: Path) -> tuple[Path, Path]:
        """Atomically create the ``.trashinfo`` sidecar under a free name.

        The sidecar is created with O_EXCL first, which claims the name in
        ``files/`` for this deletion.
        """
        stem, suffix = (source.name, "") if source.is_dir() else (source.stem, source.suffix)
        if not stem:
            stem, suffix = source.name, ""
        body = format_trash_info(source, datetime.now()).encode("utf-8")

        counter = 0
        while True:
            name = source.name if counter == 0 else f"{stem} ({counter}){suffix}"
            destination = self.settings.files_dir / name
            info_path = self.settings.info_dir / f"{name}{TrashLayout.INFO_SUFFIX}"
            counter += 1
            if os.path.lexists(destination):
                continue
            try:
                fd = os.open(info_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            except FileExistsError:
                continue
            except OSError as e:
                raise _trash_error(
                    ErrorCode.TRASH_INFO_WRITE_FAILED,
                    f"Cannot write trash info for {source}: {e}",
                    info_path,
                    "trash",
                    e,
                ) from e
            try:
                os.write(fd, body)
            except OSError as e:
                os.close(fd)
                self._discard(info_path)
                raise _trash_error(
                    ErrorCode.TRASH_INFO_WRITE_FAILED,
                    f"Cannot write trash info for {source}: {e}",
                    info_path,
                    "trash",
                    e,
                ) from e
            os.close(fd)
            return destination, info_path

    def _relocate(self, source: Path, destination: Path) -> None:
        try:
            os.rename(source, destination)
            return
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise

        # Cross-device: copy fully, then remove the source.
        try:
            if source.is_dir() and not source.is_symlink():
                shutil.copytree(source, destination, symlinks=True)
            else:
                shutil.copy2(source, destination, follow_symlinks=False)
        except OSError:
            if os.path.lexists(destination):
                self._discard(destination)
            raise
        _remove_path(source)

    def _discard(self, path: Path) -> None:
        try:
            _remove_path(path)
        except OSError as e:
            log_error(f"Trash cleanup failed for {path}", e, logger)

    def permanently_delete(self, path: str | Path) -> None:
        """
        Recursively remove ``path``.

        No partial undo is attempted: entries removed before a failure stay
        removed and the rest are left as they are.

        Raises:
            TrashError: If the path is missing or removal fails
        """
        target = Path(path)
        if not os.path.lexists(target):
            raise _trash_error(ErrorCode.FILE_NOT_FOUND, f"File not found: {target}", target, "delete")
        try:
            _remove_path(target)
        except OSError as e:
            raise _trash_error(
                ErrorCode.FILE_DELETE_ERROR,
                f"Failed to delete {target}: {e}",
                target,
                "delete",
                e,
            ) from e
        log_file_operation(logger, "delete", target)
