"""
Shared machinery for the operation handlers.

Every batch handler follows the same shape: validate, create and announce
a Process, work through the items in selection order, stop at the first
failing item, and finish with exactly one terminal announcement.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from concurrent.futures import Future
from dataclasses import dataclass
from pathlib import Path

from filedeck.config.models.settings import Settings
from filedeck.core.clipboard import ClipboardStage
from filedeck.core.models import Process
from filedeck.core.progress_registry import ProgressRegistry
from filedeck.core.runner import TaskRunner
from filedeck.core.trash import TrashAdapter
from filedeck.shared.errors import DomainError, ErrorCode, ErrorContext, FiledeckError
from filedeck.shared.logging import log_error, log_operation_start, log_operation_success

logger = logging.getLogger(__name__)

ItemStep = Callable[[Path], None]
ItemLabel = Callable[[Path], str]


@dataclass
class EngineContext:
    """Collaborators shared by every handler."""

    settings: Settings
    registry: ProgressRegistry
    trash: TrashAdapter
    clipboard: ClipboardStage
    runner: TaskRunner


class OperationHandler:
    """Base class wiring a handler to the engine context."""

    operation = "operation"

    def __init__(self, context: EngineContext) -> None:
        self.context = context

    @property
    def registry(self) -> ProgressRegistry:
        return self.context.registry

    def submit(self, task: Callable[[str], Process], process: Process) -> Future[Process]:
        """Run ``task(process_id)`` on the runner, guarded so it always ends terminal."""
        return self.context.runner.submit(self._guarded, task, process.id)

    def _guarded(self, task: Callable[[str], Process], process_id: str) -> Process:
        started = time.perf_counter()
        log_operation_start(logger, self.operation, {"process_id": process_id})
        try:
            result = task(process_id)
        except Exception:  # noqa: BLE001
            logger.exception("%s task crashed", self.operation)
            current = self.registry.record(process_id)
            if current.is_terminal:
                return current
            return self.registry.fail(process_id)
        log_operation_success(
            logger,
            self.operation,
            (time.perf_counter() - started) * 1000,
            {"state": result.state.value, "done": result.done, "total": result.total},
        )
        return result

    def run_items(
        self,
        process_id: str,
        items: Sequence[Path],
        step: ItemStep,
        label: ItemLabel,
        *,
        advance_per_item: bool = True,
    ) -> Process:
        """
        Apply ``step`` to each item in order.

        The first failing item marks the Process failed with that item's
        label and stops the batch; completed items stay as they are.
        Cancellation is checked between items only.

        Args:
            process_id: Process driving this batch
            items: Items in selection order
            step: Single-item operation
            label: Process name for an item
            advance_per_item: Increment ``done`` after each item; off when
                ``step`` advances per file itself
        """
        for item in items:
            if self.registry.is_cancelled(process_id):
                cancelled = DomainError(
                    ErrorCode.OPERATION_CANCELLED,
                    f"Cancelled before {item.name}",
                    ErrorContext(file_path=str(item), operation=self.operation),
                )
                log_error(f"{self.operation} cancelled", cancelled, logger)
                return self.registry.fail(process_id)

            self.registry.rename(process_id, label(item))
            try:
                step(item)
            except (FiledeckError, OSError) as e:
                log_error(f"{self.operation} error: {item}", e, logger)
                return self.registry.fail(process_id, name=label(item))

            if advance_per_item:
                self.registry.advance(process_id)

        return self.registry.succeed(process_id)
