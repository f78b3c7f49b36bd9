"""
Task runners for batch operations.

``ThreadRunner`` lets a batch progress on a worker thread while the
interactive thread keeps handling input; ``InlineRunner`` runs it to
completion on the caller's thread. Both hand back a Future.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskRunner(Protocol):
    """Anything that can run a batch task and return its Future."""

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]: ...

    def shutdown(self, *, wait: bool = True) -> None: ...


class InlineRunner:
    """Runs each task immediately on the calling thread."""

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        future: Future[T] = Future()
        future.set_running_or_notify_cancel()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:  # noqa: BLE001 - delivered through the future
            logger.exception("Inline task failed")
            future.set_exception(e)
        return future

    def shutdown(self, *, wait: bool = True) -> None:
        return None


class ThreadRunner:
    """Runs tasks on a ThreadPoolExecutor."""

    def __init__(self, max_workers: int = 4) -> None:
        self.max_workers = max_workers
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="filedeck-op",
        )
        logger.debug("Started ThreadPoolExecutor with %d workers", max_workers)

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> Future[T]:
        return self._executor.submit(fn, *args, **kwargs)

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> ThreadRunner:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)
