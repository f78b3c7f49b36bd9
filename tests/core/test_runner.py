"""
Tests for the task runners.
"""

from __future__ import annotations

import threading

import pytest

from filedeck.core.runner import InlineRunner, ThreadRunner


class TestInlineRunner:
    def test_runs_on_calling_thread(self) -> None:
        future = InlineRunner().submit(threading.get_ident)
        assert future.done()
        assert future.result() == threading.get_ident()

    def test_exception_delivered_through_future(self) -> None:
        def boom() -> None:
            raise RuntimeError("boom")

        future = InlineRunner().submit(boom)
        with pytest.raises(RuntimeError):
            future.result()


class TestThreadRunner:
    def test_runs_on_worker_thread(self) -> None:
        with ThreadRunner(max_workers=2) as runner:
            future = runner.submit(lambda: threading.current_thread().name)
            assert future.result(timeout=5).startswith("filedeck-op")

    def test_passes_arguments(self) -> None:
        with ThreadRunner(max_workers=1) as runner:
            assert runner.submit(pow, 2, 10).result(timeout=5) == 1024
