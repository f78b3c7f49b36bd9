"""
Pytest configuration and shared fixtures for filedeck tests.

This module provides temp trees, settings pointing every side effect at
``tmp_path`` and an engine wired with an InlineRunner so batches finish
before the handler returns.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from filedeck.config import LoggingSettings, Settings, TrashSettings
from filedeck.core.message_bus import MessageBus
from filedeck.core.models import Message, Process
from filedeck.core.operations import FileOperationEngine
from filedeck.core.panel import Panel, PanelMode
from filedeck.core.progress_registry import ProgressRegistry
from filedeck.core.runner import InlineRunner


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with the trash and the log file under ``tmp_path``."""
    return Settings(
        trash=TrashSettings(trash_root=tmp_path / "Trash", use_native=False),
        logging=LoggingSettings(file=str(tmp_path / "logs" / "filedeck.log"), console_output=False),
    )


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Directory the panels under test list."""
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def mirrored() -> list[str]:
    """Texts pushed to the fake system clipboard."""
    return []


@pytest.fixture
def engine(settings: Settings, mirrored: list[str]) -> FileOperationEngine:
    """Engine running every batch inline."""
    return FileOperationEngine(settings, runner=InlineRunner(), clipboard_sink=mirrored.append)


@pytest.fixture
def bus() -> MessageBus:
    return MessageBus(capacity=1000, tick_threshold=5)


@pytest.fixture
def registry(bus: MessageBus) -> ProgressRegistry:
    return ProgressRegistry(bus)


@pytest.fixture
def make_files() -> Callable[..., list[Path]]:
    """Create files with the given names (and optional content) in a directory."""

    def _make(directory: Path, *names: str, content: str = "data") -> list[Path]:
        paths = []
        for name in names:
            path = directory / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
            paths.append(path)
        return paths

    return _make


def _select_panel(directory: Path, paths: list[Path]) -> Panel:
    """Select-mode panel over ``directory`` with ``paths`` selected in order."""
    panel = Panel.from_directory(directory, PanelMode.SELECT)
    panel.selected = list(paths)
    return panel


def _cursor_panel(directory: Path, path: Path) -> Panel:
    """Browser-mode panel over ``directory`` with the cursor on ``path``."""
    panel = Panel.from_directory(directory)
    panel.cursor = [e.location for e in panel.elements].index(path)
    return panel


def _process_updates(messages: list[Message], process_id: str) -> list[Process]:
    """Process snapshots for one id, in delivery order."""
    return [m.process for m in messages if m.process is not None and m.process.id == process_id]


@pytest.fixture
def select_panel() -> Callable[[Path, list[Path]], Panel]:
    return _select_panel


@pytest.fixture
def cursor_panel() -> Callable[[Path, Path], Panel]:
    return _cursor_panel


@pytest.fixture
def process_updates() -> Callable[[list[Message], str], list[Process]]:
    return _process_updates
