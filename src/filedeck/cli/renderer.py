"""
Bus renderer for the CLI.

Drains the engine message bus on the calling thread and mirrors every
Process snapshot into a rich progress bar, one bar per Process id.
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from filedeck.core.message_bus import MessageBus
from filedeck.core.models import Message, MessageKind, Process, ProcessState
from filedeck.shared.constants import BusDefaults

_STATE_STYLE = {
    ProcessState.IN_PROGRESS: "",
    ProcessState.SUCCESSFUL: "[green]",
    ProcessState.FAILURE: "[red]",
}


class BusRenderer:
    """
    Renders engine messages with rich.

    Args:
        bus: Bus to drain
        console: Console to draw on
        disabled: Skip drawing (still drains the bus)
    """

    def __init__(self, bus: MessageBus, console: Console | None = None, *, disabled: bool = False) -> None:
        self.bus = bus
        self.console = console or Console()
        self.disabled = disabled
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            console=self.console,
            disable=disabled,
            transient=False,
        )
        self._tasks: dict[str, TaskID] = {}
        self.last: dict[str, Process] = {}

    def follow(self, future: Future[Any]) -> Any:
        """Render messages until ``future`` completes, then return its result."""
        with self._progress:
            while not future.done():
                message = self.bus.get(timeout=BusDefaults.DRAIN_TIMEOUT)
                if message is not None:
                    self.handle(message)
            for message in self.bus.drain():
                self.handle(message)
        return future.result()

    def handle(self, message: Message) -> None:
        if message.kind is MessageKind.CONFIRMATION_REQUEST and message.confirmation is not None:
            self.console.print(f"[yellow]{escape(message.confirmation.title)}[/yellow]")
            return
        process = message.process
        if process is None:
            return
        self.last[process.id] = process
        description = f"{_STATE_STYLE[process.state]}{escape(process.name)}"
        task_id = self._tasks.get(process.id)
        if task_id is None:
            self._tasks[process.id] = self._progress.add_task(
                description,
                total=process.total or None,
                completed=process.done,
            )
            return
        self._progress.update(
            task_id,
            description=description,
            total=process.total or None,
            completed=process.done,
        )
