"""
Panel contract consumed by the operation handlers.

The UI layer owns panels; the engine only reads the location, elements,
cursor and selection, and applies the selection/cursor handback after
batch actions.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class PanelMode(str, Enum):
    """Browser mode acts on the cursor element, select mode on the selection."""

    BROWSER = "browser"
    SELECT = "select"


@dataclass(frozen=True)
class PanelElement:
    """One listed file or directory."""

    name: str
    location: Path

    @classmethod
    def from_path(cls, path: str | Path) -> PanelElement:
        path = Path(path)
        return cls(name=path.name, location=path)


@dataclass
class Panel:
    """A file panel: directory, listing, cursor and ordered multi-selection."""

    location: Path
    elements: list[PanelElement] = field(default_factory=list)
    cursor: int = 0
    selected: list[Path] = field(default_factory=list)
    mode: PanelMode = PanelMode.BROWSER

    @classmethod
    def from_directory(cls, location: str | Path, mode: PanelMode = PanelMode.BROWSER) -> Panel:
        """Build a panel listing ``location`` with directories first, then by name."""
        location = Path(location).absolute()
        entries = sorted(
            os.scandir(location),
            key=lambda e: (not e.is_dir(follow_symlinks=False), e.name.lower()),
        )
        return cls(
            location=location,
            elements=[PanelElement(name=e.name, location=Path(e.path)) for e in entries],
            mode=mode,
        )

    def current_element(self) -> PanelElement | None:
        if not self.elements or not 0 <= self.cursor < len(self.elements):
            return None
        return self.elements[self.cursor]

    def targets(self) -> list[Path]:
        """Paths an action applies to, in selection order."""
        if self.mode is PanelMode.SELECT:
            return list(self.selected)
        element = self.current_element()
        return [element.location] if element is not None else []

    def toggle_selection(self, path: str | Path) -> None:
        path = Path(path)
        if path in self.selected:
            self.selected.remove(path)
        else:
            self.selected.append(path)

    def clamp_cursor(self, length: int | None = None) -> None:
        """Clamp the cursor to the last valid index of a listing of ``length``."""
        length = len(self.elements) if length is None else length
        if self.cursor > length - 1:
            self.cursor = max(length - 1, 0)
        self.cursor = max(self.cursor, 0)

    def after_batch(self, removed: int = 0) -> None:
        """Selection/cursor handback after a batch action.

        Clears the multi-selection and clamps the cursor to a listing
        shrunk by ``removed`` entries.
        """
        self.selected.clear()
        self.clamp_cursor(len(self.elements) - removed)

    def after_single_removal(self) -> None:
        """Move the cursor up when the last element was removed."""
        if self.cursor == len(self.elements) - 1:
            self.cursor = max(self.cursor - 1, 0)
