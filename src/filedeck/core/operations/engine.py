"""
FileOperationEngine - the facade the UI layer talks to.

Owns the message bus, the progress registry, the trash adapter, the
clipboard stage and the task runner, and exposes one method per user
action. Handlers run their batch work on the runner and report through
the bus; the UI drains ``engine.bus`` on its own thread.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from pathlib import Path

from filedeck.config import Settings, get_config
from filedeck.core.clipboard import ClipboardSink, ClipboardStage
from filedeck.core.message_bus import MessageBus
from filedeck.core.models import ConfirmationRequest, Process
from filedeck.core.operations.archive_ops import ArchiveHandler
from filedeck.core.operations.base import EngineContext
from filedeck.core.operations.delete import DeleteHandler
from filedeck.core.operations.naming import NamingHandler
from filedeck.core.operations.transfer import TransferHandler
from filedeck.core.panel import Panel
from filedeck.core.progress_registry import ProgressRegistry
from filedeck.core.runner import TaskRunner, ThreadRunner
from filedeck.core.trash import TrashAdapter
from filedeck.shared.errors import TrashError
from filedeck.shared.logging import log_error

logger = logging.getLogger(__name__)


class FileOperationEngine:
    """
    File operation engine.

    Args:
        settings: Engine settings (loaded through ``get_config`` if omitted)
        runner: Task runner (a ThreadRunner sized from settings if omitted)
        clipboard_sink: System clipboard writer passed to the ClipboardStage
    """

    def __init__(
        self,
        settings: Settings | None = None,
        runner: TaskRunner | None = None,
        clipboard_sink: ClipboardSink | None = None,
    ) -> None:
        self.settings = settings or get_config()
        self.bus = MessageBus(
            capacity=self.settings.bus.capacity,
            tick_threshold=self.settings.bus.tick_threshold,
        )
        self.registry = ProgressRegistry(self.bus)
        self.trash = TrashAdapter(self.settings.trash)
        try:
            self.trash.ensure_directories()
        except TrashError as e:
            log_error("Trash setup failed", e, logger)
        self.clipboard = ClipboardStage(self.settings.clipboard, sink=clipboard_sink)
        self.runner = runner or ThreadRunner(self.settings.operations.max_workers)

        self.context = EngineContext(
            settings=self.settings,
            registry=self.registry,
            trash=self.trash,
            clipboard=self.clipboard,
            runner=self.runner,
        )
        self.deletes = DeleteHandler(self.context)
        self.transfers = TransferHandler(self.context)
        self.archives = ArchiveHandler(self.context)
        self.naming = NamingHandler(self.context)

    # Delete
    def request_delete(self, panel: Panel) -> ConfirmationRequest | None:
        return self.deletes.request_delete(panel)

    def confirm(self, request: ConfirmationRequest, panel: Panel) -> Future[Process] | None:
        return self.deletes.confirm(request, panel)

    def trash_items(self, panel: Panel, paths: list[Path] | None = None) -> Future[Process] | None:
        return self.deletes.trash_items(panel, paths)

    def permanently_delete_items(
        self, panel: Panel, paths: list[Path] | None = None
    ) -> Future[Process] | None:
        return self.deletes.permanently_delete_items(panel, paths)

    # Clipboard
    def copy_items(self, panel: Panel) -> list[Path]:
        return self.transfers.copy_items(panel)

    def cut_items(self, panel: Panel) -> list[Path]:
        return self.transfers.cut_items(panel)

    def paste_items(self, panel: Panel) -> Future[Process] | None:
        return self.transfers.paste_items(panel)

    # Archives
    def extract_item(self, panel: Panel) -> Future[Process] | None:
        return self.archives.extract_item(panel)

    def compress_item(self, panel: Panel) -> Future[Process] | None:
        return self.archives.compress_item(panel)

    # Naming
    def create_item(self, panel: Panel, name: str) -> Path | None:
        return self.naming.create_item(panel, name)

    def rename_item(self, panel: Panel, new_name: str) -> Path | None:
        return self.naming.rename_item(panel, new_name)

    def cancel(self, process_id: str) -> None:
        """Stop a running batch before its next item."""
        self.registry.cancel(process_id)

    def shutdown(self, *, wait: bool = True) -> None:
        logger.debug("Shutting down file operation engine")
        self.runner.shutdown(wait=wait)

    def __enter__(self) -> FileOperationEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)
