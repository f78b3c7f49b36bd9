"""Copy, cut and paste through the Clipboard Stage."""

from __future__ import annotations

import errno
import logging
import os
import shutil
from collections.abc import Callable
from concurrent.futures import Future
from pathlib import Path

from filedeck.core.models import Process
from filedeck.core.operations.base import OperationHandler
from filedeck.core.panel import Panel
from filedeck.core.paths import count_files, resolve_collision_free_name, same_device, total_file_count
from filedeck.shared.constants import FileSystem, Icons
from filedeck.shared.errors import DomainError, ErrorCode, ErrorContext, wrap_os_error
from filedeck.shared.logging import log_file_operation

logger = logging.getLogger(__name__)

FileCallback = Callable[[Path], None]


def copy_file(source: Path, destination: Path, buffer_size: int = FileSystem.COPY_BUFFER_SIZE) -> None:
    """Copy one regular file in ``buffer_size`` chunks, then its metadata.

    ``destination`` must not exist yet.
    """
    with open(source, "rb") as src, open(destination, "xb") as dst:
        shutil.copyfileobj(src, dst, buffer_size)
    shutil.copystat(source, destination)


def copy_tree(
    source: Path,
    destination: Path,
    on_file: FileCallback | None = None,
    buffer_size: int = FileSystem.COPY_BUFFER_SIZE,
) -> None:
    """
    Copy ``source`` to ``destination`` depth-first.

    Symlinks are recreated rather than followed. ``on_file`` is called
    after each non-directory entry is written, so callers can report
    per-file progress.
    """
    if source.is_symlink():
        os.symlink(os.readlink(source), destination)
        if on_file is not None:
            on_file(destination)
        return

    if not source.is_dir():
        copy_file(source, destination, buffer_size)
        if on_file is not None:
            on_file(destination)
        return

    destination.mkdir(mode=FileSystem.DIRECTORY_MODE)
    with os.scandir(source) as entries:
        children = sorted(entries, key=lambda e: e.name)
    for child in children:
        copy_tree(Path(child.path), destination / child.name, on_file, buffer_size)
    shutil.copystat(source, destination)


def _remove_source(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def _is_inside(path: Path, directory: Path) -> bool:
    try:
        path.resolve().relative_to(directory.resolve())
    except ValueError:
        return False
    return True


class TransferHandler(OperationHandler):
    """Stages copy/cut sets and pastes them into a panel's directory."""

    operation = "paste"

    def copy_items(self, panel: Panel) -> list[Path]:
        """Stage the panel targets for copy."""
        return self.context.clipboard.stage_copy(panel.targets(), cut=False)

    def cut_items(self, panel: Panel) -> list[Path]:
        """Stage the panel targets for move."""
        return self.context.clipboard.stage_copy(panel.targets(), cut=True)

    def paste_items(self, panel: Panel) -> Future[Process] | None:
        """
        Paste the staged set into ``panel.location``.

        The stage is cleared on entry. Progress is counted in files, so a
        directory advances the Process once per file inside it. Items that
        collide with an existing name get a `` (N)`` suffix. A cut item is
        removed from its source only after its content fully landed.

        Returns:
            Future resolving to the terminal Process, or None if nothing
            was staged
        """
        items, cut = self.context.clipboard.take_all()
        if not items:
            return None

        destination_dir = Path(panel.location)
        icon = Icons.CUT if cut else Icons.COPY
        process = self.registry.start(Icons.label(icon, items[0].name), total=total_file_count(items))
        panel.after_batch(0)

        logger.info("Pasting %d item(s) into %s (cut=%s)", len(items), destination_dir, cut)
        return self.submit(
            lambda pid: self.run_items(
                pid,
                items,
                lambda item: self._paste_one(pid, item, destination_dir, cut),
                lambda item: Icons.label(icon, item.name),
                advance_per_item=False,
            ),
            process,
        )

    def _paste_one(self, process_id: str, item: Path, destination_dir: Path, cut: bool) -> None:
        if item.is_dir() and not item.is_symlink() and _is_inside(destination_dir, item):
            raise DomainError(
                ErrorCode.INVALID_PATH,
                f"Cannot paste {item} into itself",
                ErrorContext(file_path=str(item), operation=self.operation),
            )

        if cut and item.parent.resolve() == destination_dir.resolve():
            # Moving onto itself leaves the item where it is.
            logger.debug("%s is already in %s, nothing to move", item.name, destination_dir)
            self.registry.advance(process_id, step=count_files(item))
            return

        target = resolve_collision_free_name(destination_dir / item.name)

        if cut and same_device(item, destination_dir):
            files = count_files(item)
            try:
                os.rename(item, target)
            except OSError as e:
                if e.errno != errno.EXDEV:
                    raise wrap_os_error(e, item, "move", ErrorCode.FILE_MOVE_ERROR) from e
                logger.debug("Rename across devices for %s, copying instead", item)
            else:
                log_file_operation(logger, "move", item, target)
                self.registry.advance(process_id, step=files)
                return

        buffer_size = self.context.settings.operations.copy_buffer_size
        copy_tree(item, target, lambda _: self.registry.advance(process_id), buffer_size)
        log_file_operation(logger, "copy", item, target)

        if cut:
            try:
                _remove_source(item)
            except OSError as e:
                raise wrap_os_error(e, item, "move", ErrorCode.FILE_MOVE_ERROR) from e
            log_file_operation(logger, "move", item, target)
