"""
Clipboard Stage: the pending copy/cut set.

Each copy or cut replaces the staged set wholesale; paste consumes it
with ``take_all``. When exactly one regular file below the mirror limit
is staged, its content is also pushed to the system clipboard through
pyperclip so other applications can paste it. Mirroring is best-effort.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Sequence
from pathlib import Path

import pyperclip

from filedeck.config.models import ClipboardSettings
from filedeck.shared.errors import ClipboardError, ErrorCode, ErrorContext
from filedeck.shared.logging import log_error

logger = logging.getLogger(__name__)

ClipboardSink = Callable[[str], None]


class ClipboardStage:
    """Staged paths plus the cut flag.

    Owned by the interactive thread; background tasks never touch it.

    Args:
        settings: Mirroring switch and size ceiling
        sink: Writes text to the system clipboard (``pyperclip.copy`` by default)
    """

    def __init__(
        self,
        settings: ClipboardSettings | None = None,
        sink: ClipboardSink | None = None,
    ) -> None:
        self.settings = settings or ClipboardSettings()
        self._sink = sink or pyperclip.copy
        self._items: list[Path] = []
        self._cut = False

    @property
    def items(self) -> list[Path]:
        return list(self._items)

    @property
    def cut(self) -> bool:
        return self._cut

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def stage_copy(self, paths: Sequence[str | Path], *, cut: bool = False) -> list[Path]:
        """
        Replace the staged set with ``paths`` in selection order.

        Paths that no longer exist are not staged. A single small regular
        file is mirrored to the system clipboard.

        Returns:
            The staged paths
        """
        staged: list[Path] = []
        for raw in paths:
            path = Path(raw)
            if os.path.lexists(path):
                staged.append(path)
            else:
                logger.debug("Not staging missing path %s", path)

        self._items = staged
        self._cut = cut if staged else False
        logger.debug("Staged %d item(s) for %s", len(staged), "cut" if cut else "copy")

        if len(staged) == 1:
            self._mirror(staged[0])
        return list(staged)

    def take_all(self) -> tuple[list[Path], bool]:
        """Return the staged set and cut flag, clearing the stage."""
        items, cut = self._items, self._cut
        self._items = []
        self._cut = False
        return items, cut

    def clear(self) -> None:
        self._items = []
        self._cut = False

    def _mirror(self, path: Path) -> bool:
        """Push the content of ``path`` to the system clipboard if eligible."""
        if not self.settings.mirror_enabled:
            return False
        try:
            info = os.stat(path)
        except OSError as e:
            log_error(f"Clipboard mirror stat failed for {path}", e, logger)
            return False
        if not stat.S_ISREG(info.st_mode) or info.st_size >= self.settings.mirror_limit_bytes:
            return False

        try:
            content = path.read_bytes()
            self._sink(content.decode("utf-8", errors="surrogateescape"))
        except (OSError, UnicodeError, pyperclip.PyperclipException) as e:
            log_error(
                "Clipboard mirror failed",
                ClipboardError(
                    ErrorCode.CLIPBOARD_MIRROR_FAILED,
                    f"Could not mirror {path} to the system clipboard: {e}",
                    ErrorContext(file_path=str(path), operation="clipboard_mirror"),
                    e,
                ),
                logger,
            )
            return False
        return True
