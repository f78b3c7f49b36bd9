"""
Tests for ProgressRegistry transition rules.
"""

from __future__ import annotations

import pytest

from filedeck.core.message_bus import MessageBus
from filedeck.core.models import MessageKind, ProcessState
from filedeck.core.progress_registry import ProgressRegistry
from filedeck.shared.errors import DomainError, ErrorCode


class TestProgressRegistry:
    def test_start_announces_process(self, registry: ProgressRegistry, bus: MessageBus) -> None:
        process = registry.start("copy a.txt", total=3)

        messages = bus.drain()
        assert len(messages) == 1
        assert messages[0].kind is MessageKind.PROCESS_UPDATE
        assert messages[0].id == process.id
        assert messages[0].process.state is ProcessState.IN_PROGRESS
        assert messages[0].is_essential
        assert process.id in registry

    def test_ids_are_unique(self, registry: ProgressRegistry) -> None:
        ids = {registry.start("job", total=1).id for _ in range(50)}
        assert len(ids) == 50

    def test_record_returns_working_copy(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=2)
        copy = registry.record(process.id)
        copy.done = 2

        assert registry.record(process.id).done == 0

    def test_record_unknown_id(self, registry: ProgressRegistry) -> None:
        with pytest.raises(DomainError) as exc_info:
            registry.record("missing")
        assert exc_info.value.code == ErrorCode.UNKNOWN_PROCESS

    def test_advance_clamps_to_total(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=2)
        registry.advance(process.id, step=5)

        assert registry.record(process.id).done == 2

    def test_update_clamps_done(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=2)
        process.done = 7
        registry.update(process)

        assert registry.record(process.id).done == 2

    def test_done_cannot_go_backwards(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=5)
        registry.advance(process.id, step=3)
        stale = registry.record(process.id)
        stale.done = 1

        with pytest.raises(DomainError) as exc_info:
            registry.update(stale)
        assert exc_info.value.code == ErrorCode.INVALID_STATE_TRANSITION

    def test_success_forces_done_to_total(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=4)
        registry.advance(process.id)
        finished = registry.succeed(process.id)

        assert finished.state is ProcessState.SUCCESSFUL
        assert finished.done == finished.total == 4
        assert finished.done_time is not None

    def test_failure_keeps_done(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=4)
        registry.advance(process.id, step=2)
        failed = registry.fail(process.id, name="bad item")

        assert failed.state is ProcessState.FAILURE
        assert failed.done == 2
        assert failed.name == "bad item"
        assert failed.done_time is not None

    def test_no_transition_out_of_terminal_state(self, registry: ProgressRegistry, bus: MessageBus) -> None:
        process = registry.start("job", total=1)
        registry.succeed(process.id)

        with pytest.raises(DomainError):
            registry.fail(process.id)
        terminal = [m for m in bus.drain() if m.is_terminal]
        assert len(terminal) == 1

    def test_done_time_only_on_terminal(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=3)
        registry.advance(process.id)

        assert registry.record(process.id).done_time is None

    def test_ticks_are_not_essential(self, registry: ProgressRegistry, bus: MessageBus) -> None:
        process = registry.start("job", total=3)
        registry.advance(process.id)

        messages = bus.drain()
        assert [m.tick for m in messages] == [False, True]

    def test_rename_does_not_announce(self, registry: ProgressRegistry, bus: MessageBus) -> None:
        process = registry.start("job", total=3)
        bus.drain()
        registry.rename(process.id, "second item")

        assert bus.pending() == 0
        assert registry.record(process.id).name == "second item"

    def test_cancel(self, registry: ProgressRegistry) -> None:
        process = registry.start("job", total=3)
        assert registry.is_cancelled(process.id) is False

        registry.cancel(process.id)
        assert registry.is_cancelled(process.id) is True

    def test_active_and_prune(self, registry: ProgressRegistry) -> None:
        first = registry.start("one", total=1)
        second = registry.start("two", total=1)
        registry.succeed(first.id)

        assert [p.id for p in registry.active()] == [second.id]
        assert registry.prune_finished() == 1
        assert len(registry) == 1
        assert first.id not in registry
