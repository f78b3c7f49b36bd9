"""
ProgressRegistry - the single source of truth for Process records.

Every in-flight or finished operation owns one entry keyed by its id.
Operation tasks only hold their id; they read a working copy with
``record``, mutate it and write it back with ``update``, which validates
the transition and announces the new snapshot on the MessageBus.
"""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime

from filedeck.core.message_bus import MessageBus
from filedeck.core.models import Message, Process, ProcessState
from filedeck.shared.errors import DomainError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)


def _new_process_id() -> str:
    return uuid.uuid4().hex


class ProgressRegistry:
    """
    Arena of Process records keyed by id.

    Invariants enforced on every write:
    - ``done`` never decreases and never exceeds ``total``
    - a terminal state is entered at most once and never left
    - a successful Process has ``done == total``
    - ``done_time`` is stamped exactly when a terminal state is entered
    """

    def __init__(self, bus: MessageBus) -> None:
        self.bus = bus
        self._lock = threading.Lock()
        self._processes: dict[str, Process] = {}
        self._cancel_events: dict[str, threading.Event] = {}

    def start(self, name: str, total: int) -> Process:
        """Create an in-progress Process and announce it.

        Returns:
            A working copy of the new record
        """
        process = Process(
            id=_new_process_id(),
            name=name,
            state=ProcessState.IN_PROGRESS,
            total=max(total, 0),
            done=0,
        )
        with self._lock:
            self._processes[process.id] = process
            self._cancel_events[process.id] = threading.Event()

        logger.debug("Process %s started: %s (total=%d)", process.id, name, process.total)
        self.bus.announce(Message.for_process(process))
        return process.model_copy()

    def record(self, process_id: str) -> Process:
        """Return a working copy of the last known snapshot for ``process_id``.

        Raises:
            DomainError: If the id is unknown
        """
        with self._lock:
            process = self._processes.get(process_id)
        if process is None:
            raise DomainError(
                ErrorCode.UNKNOWN_PROCESS,
                f"Unknown process id: {process_id}",
                ErrorContext(operation="record", additional_data={"process_id": process_id}),
            )
        return process.model_copy()

    def update(self, process: Process) -> bool:
        """Validate and store ``process``, then announce it.

        In-progress snapshots go out as ticks and may be coalesced by the
        bus; terminal snapshots are always delivered.

        Returns:
            True if the snapshot was queued on the bus

        Raises:
            DomainError: On an invalid transition
        """
        with self._lock:
            current = self._processes.get(process.id)
            if current is None:
                raise DomainError(
                    ErrorCode.UNKNOWN_PROCESS,
                    f"Unknown process id: {process.id}",
                    ErrorContext(operation="update", additional_data={"process_id": process.id}),
                )
            stored = self._validated(current, process)
            self._processes[stored.id] = stored

        return self.bus.announce(Message.for_process(stored, tick=not stored.is_terminal))

    def _validated(self, current: Process, new: Process) -> Process:
        if current.is_terminal:
            raise DomainError(
                ErrorCode.INVALID_STATE_TRANSITION,
                f"Process {current.id} already finished as {current.state.value}",
                ErrorContext(
                    operation="update",
                    additional_data={"process_id": current.id, "state": new.state},
                ),
            )
        if new.done < current.done:
            raise DomainError(
                ErrorCode.INVALID_STATE_TRANSITION,
                f"Process {current.id} progress went backwards ({current.done} -> {new.done})",
                ErrorContext(operation="update", additional_data={"process_id": current.id}),
            )

        stored = new.model_copy(update={"total": current.total, "done": min(new.done, current.total)})
        if stored.state is ProcessState.SUCCESSFUL:
            stored.done = stored.total
        if stored.is_terminal:
            stored.done_time = stored.done_time or datetime.now()
        else:
            stored.done_time = None
        return stored

    def advance(self, process_id: str, name: str | None = None, step: int = 1) -> Process:
        """Increment ``done`` by ``step`` (clamped to ``total``) and announce a tick."""
        process = self.record(process_id)
        process.done = min(process.done + step, process.total)
        if name is not None:
            process.name = name
        self.update(process)
        return process

    def rename(self, process_id: str, name: str) -> None:
        """Change the label without announcing; the next snapshot carries it."""
        with self._lock:
            current = self._processes.get(process_id)
            if current is not None and not current.is_terminal:
                self._processes[process_id] = current.model_copy(update={"name": name})

    def succeed(self, process_id: str) -> Process:
        process = self.record(process_id)
        process.state = ProcessState.SUCCESSFUL
        self.update(process)
        return self.record(process_id)

    def fail(self, process_id: str, name: str | None = None) -> Process:
        process = self.record(process_id)
        process.state = ProcessState.FAILURE
        if name is not None:
            process.name = name
        self.update(process)
        return self.record(process_id)

    def cancel(self, process_id: str) -> None:
        """Request cooperative cancellation; checked between items only."""
        with self._lock:
            event = self._cancel_events.get(process_id)
        if event is not None:
            event.set()

    def is_cancelled(self, process_id: str) -> bool:
        with self._lock:
            event = self._cancel_events.get(process_id)
        return event is not None and event.is_set()

    def processes(self) -> list[Process]:
        """Snapshot of every known Process."""
        with self._lock:
            return [p.model_copy() for p in self._processes.values()]

    def active(self) -> list[Process]:
        return [p for p in self.processes() if not p.is_terminal]

    def prune_finished(self) -> int:
        """Forget terminal Processes. Returns how many were removed."""
        with self._lock:
            finished = [pid for pid, p in self._processes.items() if p.is_terminal]
            for pid in finished:
                del self._processes[pid]
                self._cancel_events.pop(pid, None)
        return len(finished)

    def __len__(self) -> int:
        with self._lock:
            return len(self._processes)

    def __contains__(self, process_id: object) -> bool:
        with self._lock:
            return process_id in self._processes
