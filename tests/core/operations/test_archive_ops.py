"""
Tests for the extract and compress handlers.
"""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path

from filedeck.core.models import ProcessState
from filedeck.core.operations import FileOperationEngine
from filedeck.core.panel import Panel


def _zip(path: Path, entries: dict[str, str]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


class TestExtractItem:
    def test_extracts_next_to_archive(self, engine: FileOperationEngine, workdir: Path, cursor_panel) -> None:
        archive_path = _zip(workdir / "photos.zip", {"a.jpg": "A", "b/c.jpg": "C"})

        process = engine.extract_item(cursor_panel(workdir, archive_path)).result()

        assert process.state is ProcessState.SUCCESSFUL
        assert process.done == process.total == 2
        assert (workdir / "photos" / "b" / "c.jpg").read_text() == "C"

    def test_existing_directory_not_merged(
        self, engine: FileOperationEngine, workdir: Path, cursor_panel
    ) -> None:
        (workdir / "photos").mkdir()
        (workdir / "photos" / "mine.txt").write_text("keep")
        archive_path = _zip(workdir / "photos.zip", {"a.jpg": "A"})

        engine.extract_item(cursor_panel(workdir, archive_path)).result()

        assert sorted(p.name for p in (workdir / "photos").iterdir()) == ["mine.txt"]
        assert (workdir / "photos (1)" / "a.jpg").read_text() == "A"

    def test_corrupt_archive_fails_process(
        self, engine: FileOperationEngine, workdir: Path, cursor_panel
    ) -> None:
        broken = workdir / "broken.zip"
        broken.write_bytes(b"garbage")

        process = engine.extract_item(cursor_panel(workdir, broken)).result()

        assert process.state is ProcessState.FAILURE
        assert process.total == 0
        assert engine.registry.record(process.id).done_time is not None

    def test_entry_failure_keeps_earlier_entries(
        self, engine: FileOperationEngine, workdir: Path, cursor_panel, mocker
    ) -> None:
        archive_path = _zip(workdir / "photos.zip", {"a.jpg": "A", "b.jpg": "B", "c.jpg": "C"})
        real_copy = shutil.copyfileobj
        calls = []

        def copy_then_fail(src, dst, *args):
            calls.append(src)
            if len(calls) == 2:
                raise OSError("device error")
            return real_copy(src, dst, *args)

        mocker.patch("filedeck.core.archive.shutil.copyfileobj", side_effect=copy_then_fail)

        process = engine.extract_item(cursor_panel(workdir, archive_path)).result()

        assert process.state is ProcessState.FAILURE
        assert process.done == 1
        assert (workdir / "photos" / "a.jpg").read_text() == "A"
        assert not (workdir / "photos" / "c.jpg").exists()

    def test_empty_panel_is_noop(self, engine: FileOperationEngine, workdir: Path) -> None:
        assert engine.extract_item(Panel(location=workdir)) is None
        assert len(engine.registry) == 0


class TestCompressItem:
    def test_compress_directory(self, engine: FileOperationEngine, workdir: Path, make_files, cursor_panel) -> None:
        make_files(workdir, "docs/a.md", "docs/b.md")

        process = engine.compress_item(cursor_panel(workdir, workdir / "docs")).result()

        assert process.state is ProcessState.SUCCESSFUL
        assert process.done == process.total == 2
        with zipfile.ZipFile(workdir / "docs.zip") as zf:
            assert sorted(zf.namelist()) == ["docs/a.md", "docs/b.md"]

    def test_existing_zip_gets_counter(
        self, engine: FileOperationEngine, workdir: Path, make_files, cursor_panel
    ) -> None:
        (source,) = make_files(workdir, "report.txt")
        (workdir / "report.zip").write_text("not mine")

        engine.compress_item(cursor_panel(workdir, source)).result()

        assert (workdir / "report.zip").read_text() == "not mine"
        with zipfile.ZipFile(workdir / "report (1).zip") as zf:
            assert zf.namelist() == ["report.txt"]

    def test_symlinks_counted_and_archived(self, engine: FileOperationEngine, workdir: Path, cursor_panel) -> None:
        source = workdir / "proj"
        (source / "real").mkdir(parents=True)
        (source / "real" / "f.txt").write_text("f")
        (source / "link_to_dir").symlink_to("real")
        (source / "dangling").symlink_to("missing")

        process = engine.compress_item(cursor_panel(workdir, source)).result()

        assert process.state is ProcessState.SUCCESSFUL
        assert process.done == process.total == 3
        with zipfile.ZipFile(workdir / "proj.zip") as zf:
            assert len(zf.namelist()) == 3
