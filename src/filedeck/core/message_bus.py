"""
MessageBus - ordered multi-producer/single-consumer queue for engine messages.

Producers are operation tasks announcing Process snapshots and
confirmation requests; the single consumer is the renderer on the
interactive thread.

Drop policy:
- A tick (intermediate progress snapshot) is queued only while fewer than
  ``tick_threshold`` messages are pending and the queue is below
  ``capacity``; otherwise it is dropped. Every snapshot is a full state,
  so the next delivered one supersedes a dropped tick.
- Essential messages (Process creation, terminal snapshots, confirmation
  requests) are always queued, even past ``capacity``.
- Nothing is ever reordered: delivery is FIFO across all producers, so
  messages for one Process id arrive in emission order.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from dataclasses import dataclass

from filedeck.core.models import Message
from filedeck.shared.constants import BusDefaults


@dataclass
class BusStats:
    """Statistics for bus operations."""

    pending: int
    capacity: int
    tick_threshold: int
    total_announced: int
    total_delivered: int
    ticks_dropped: int
    max_pending_reached: int


class MessageBus:
    """
    Thread-safe bounded message queue with tick coalescing.

    Args:
        capacity: Maximum number of pending messages accepted for ticks
        tick_threshold: Pending count at or above which ticks are dropped
    """

    def __init__(
        self,
        capacity: int = BusDefaults.CAPACITY,
        tick_threshold: int = BusDefaults.TICK_THRESHOLD,
    ) -> None:
        if capacity <= 0:
            msg = "Capacity must be positive"
            raise ValueError(msg)
        if tick_threshold <= 0 or tick_threshold > capacity:
            msg = "tick_threshold must be in [1, capacity]"
            raise ValueError(msg)

        self._capacity = capacity
        self._tick_threshold = tick_threshold

        self._lock = threading.RLock()
        self._not_empty = threading.Condition(self._lock)

        self._queue: deque[Message] = deque()

        self._total_announced = 0
        self._total_delivered = 0
        self._ticks_dropped = 0
        self._max_pending_reached = 0

    def announce(self, message: Message) -> bool:
        """
        Enqueue a message for the renderer.

        Args:
            message: Message to deliver

        Returns:
            True if the message was queued, False if it was a tick that
            got coalesced away
        """
        with self._not_empty:
            if not message.is_essential and not self._accepts_tick():
                self._ticks_dropped += 1
                return False

            self._queue.append(message)
            self._total_announced += 1
            self._max_pending_reached = max(self._max_pending_reached, len(self._queue))
            self._not_empty.notify()
            return True

    def under_threshold(self) -> bool:
        """Return True if an intermediate tick would currently be queued."""
        with self._lock:
            return self._accepts_tick()

    def _accepts_tick(self) -> bool:
        pending = len(self._queue)
        return pending < self._tick_threshold and pending < self._capacity

    def get(self, timeout: float | None = None) -> Message | None:
        """
        Remove and return the next message, blocking until one arrives.

        Args:
            timeout: Maximum time to wait (None for no timeout)

        Returns:
            The next message, or None if the timeout expired
        """
        with self._not_empty:
            if timeout is None:
                while not self._queue:
                    self._not_empty.wait()
            else:
                end_time = time.monotonic() + timeout
                while not self._queue:
                    remaining = end_time - time.monotonic()
                    if remaining <= 0:
                        return None
                    self._not_empty.wait(remaining)

            self._total_delivered += 1
            return self._queue.popleft()

    def get_nowait(self) -> Message | None:
        """Remove and return the next message, or None if the bus is empty."""
        with self._lock:
            if not self._queue:
                return None
            self._total_delivered += 1
            return self._queue.popleft()

    def drain(self) -> list[Message]:
        """Remove and return every pending message in delivery order."""
        with self._lock:
            messages = list(self._queue)
            self._queue.clear()
            self._total_delivered += len(messages)
            return messages

    def pending(self) -> int:
        """Return the number of undelivered messages."""
        with self._lock:
            return len(self._queue)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def tick_threshold(self) -> int:
        return self._tick_threshold

    def get_stats(self) -> BusStats:
        with self._lock:
            return BusStats(
                pending=len(self._queue),
                capacity=self._capacity,
                tick_threshold=self._tick_threshold,
                total_announced=self._total_announced,
                total_delivered=self._total_delivered,
                ticks_dropped=self._ticks_dropped,
                max_pending_reached=self._max_pending_reached,
            )

    def __len__(self) -> int:
        return self.pending()

    def __repr__(self) -> str:
        return (
            f"MessageBus(pending={self.pending()}, capacity={self._capacity}, "
            f"tick_threshold={self._tick_threshold})"
        )
