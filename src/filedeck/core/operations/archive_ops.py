"""Extract and compress handlers."""

from __future__ import annotations

import logging
import os
from concurrent.futures import Future
from pathlib import Path

from filedeck.core import archive
from filedeck.core.models import Process
from filedeck.core.operations.base import OperationHandler
from filedeck.core.panel import Panel
from filedeck.core.paths import count_files, name_without_extension, resolve_collision_free_name
from filedeck.shared.constants import Icons
from filedeck.shared.errors import FiledeckError

logger = logging.getLogger(__name__)


class ArchiveHandler(OperationHandler):
    """Single-item archive operations on the element under the cursor."""

    operation = "archive"

    def extract_item(self, panel: Panel) -> Future[Process] | None:
        """
        Extract the archive under the cursor into a sibling directory named
        after it without its extension (`` (N)`` appended on collision).

        ``done`` advances once per archive entry written.
        """
        element = panel.current_element()
        if element is None or not os.path.lexists(element.location):
            return None
        source = element.location

        try:
            total = archive.count_entries(source)
        except FiledeckError as e:
            logger.warning("Cannot count entries of %s: %s", source, e.message)
            total = 0

        label = Icons.label(Icons.EXTRACT, source.name)
        process = self.registry.start(label, total=total)

        def _extract(item: Path) -> None:
            destination = resolve_collision_free_name(item.parent / name_without_extension(item))
            archive.extract(item, destination, lambda _: self.registry.advance(process.id))

        return self.submit(
            lambda pid: self.run_items(pid, [source], _extract, lambda _: label, advance_per_item=False),
            process,
        )

    def compress_item(self, panel: Panel) -> Future[Process] | None:
        """
        Compress the element under the cursor into ``<name>.zip`` beside it
        (`` (N)`` appended on collision).

        ``done`` advances once per file added.
        """
        element = panel.current_element()
        if element is None or not os.path.lexists(element.location):
            return None
        source = element.location

        try:
            total = count_files(source)
        except FiledeckError as e:
            logger.warning("Cannot count files of %s: %s", source, e.message)
            total = 0

        label = Icons.label(Icons.COMPRESS, source.name)
        process = self.registry.start(label, total=total)

        def _compress(item: Path) -> None:
            destination = resolve_collision_free_name(archive.default_zip_name(item))
            archive.compress(item, destination, lambda _: self.registry.advance(process.id))

        return self.submit(
            lambda pid: self.run_items(pid, [source], _compress, lambda _: label, advance_per_item=False),
            process,
        )
