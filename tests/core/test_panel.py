"""
Tests for the panel contract and the cursor/selection handback.
"""

from __future__ import annotations

from pathlib import Path

from filedeck.core.panel import Panel, PanelElement, PanelMode


def _panel(count: int, cursor: int) -> Panel:
    elements = [PanelElement(name=f"f{i}", location=Path(f"/d/f{i}")) for i in range(count)]
    return Panel(location=Path("/d"), elements=elements, cursor=cursor)


class TestPanel:
    def test_from_directory_lists_directories_first(self, tmp_path: Path) -> None:
        (tmp_path / "b.txt").write_text("x")
        (tmp_path / "A.txt").write_text("x")
        (tmp_path / "zdir").mkdir()

        panel = Panel.from_directory(tmp_path)

        assert [e.name for e in panel.elements] == ["zdir", "A.txt", "b.txt"]

    def test_targets_browser_mode(self) -> None:
        panel = _panel(3, cursor=1)
        assert panel.targets() == [Path("/d/f1")]

    def test_targets_select_mode_keeps_order(self) -> None:
        panel = _panel(3, cursor=0)
        panel.mode = PanelMode.SELECT
        panel.toggle_selection("/d/f2")
        panel.toggle_selection("/d/f0")

        assert panel.targets() == [Path("/d/f2"), Path("/d/f0")]

    def test_toggle_twice_unselects(self) -> None:
        panel = _panel(1, cursor=0)
        panel.toggle_selection("/d/f0")
        panel.toggle_selection("/d/f0")
        assert panel.selected == []

    def test_empty_panel_has_no_targets(self) -> None:
        assert Panel(location=Path("/d")).targets() == []

    def test_after_batch_clears_selection_and_clamps(self) -> None:
        panel = _panel(5, cursor=4)
        panel.selected = [Path("/d/f3"), Path("/d/f4")]

        panel.after_batch(removed=2)

        assert panel.selected == []
        assert panel.cursor == 2

    def test_after_batch_empty_listing(self) -> None:
        panel = _panel(2, cursor=1)
        panel.after_batch(removed=2)
        assert panel.cursor == 0

    def test_single_removal_moves_cursor_up_from_last(self) -> None:
        panel = _panel(3, cursor=2)
        panel.after_single_removal()
        assert panel.cursor == 1

    def test_single_removal_keeps_cursor_elsewhere(self) -> None:
        panel = _panel(3, cursor=1)
        panel.after_single_removal()
        assert panel.cursor == 1
