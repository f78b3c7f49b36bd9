"""
Tests for the archive adapter.
"""

from __future__ import annotations

import gzip
import io
import os
import stat
import tarfile
import zipfile
from pathlib import Path

import pytest

from filedeck.core import archive
from filedeck.shared.errors import ArchiveError, ErrorCode


def _make_zip(path: Path, entries: dict[str, str]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in entries.items():
            zf.writestr(name, content)
    return path


def _make_tar(path: Path, entries: dict[str, str], mode: str = "w:gz") -> Path:
    with tarfile.open(path, mode) as tf:
        for name, content in entries.items():
            data = content.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return path


class TestExtract:
    def test_zip(self, tmp_path: Path) -> None:
        source = _make_zip(tmp_path / "pack.zip", {"a.txt": "A", "sub/b.txt": "B"})
        seen: list[str] = []

        archive.extract(source, tmp_path / "out", seen.append)

        assert (tmp_path / "out" / "a.txt").read_text() == "A"
        assert (tmp_path / "out" / "sub" / "b.txt").read_text() == "B"
        assert seen == ["a.txt", "sub/b.txt"]

    def test_tar_gz(self, tmp_path: Path) -> None:
        source = _make_tar(tmp_path / "pack.tar.gz", {"x/y.txt": "Y"})

        archive.extract(source, tmp_path / "out")

        assert (tmp_path / "out" / "x" / "y.txt").read_text() == "Y"

    def test_single_gzip_file(self, tmp_path: Path) -> None:
        source = tmp_path / "log.txt.gz"
        with gzip.open(source, "wb") as f:
            f.write(b"line\n")

        archive.extract(source, tmp_path / "out")

        assert (tmp_path / "out" / "log.txt").read_bytes() == b"line\n"

    def test_zip_slip_rejected(self, tmp_path: Path) -> None:
        source = _make_zip(tmp_path / "evil.zip", {"ok.txt": "fine", "../escape.txt": "bad"})

        with pytest.raises(ArchiveError) as exc_info:
            archive.extract(source, tmp_path / "out")

        assert exc_info.value.code == ErrorCode.ARCHIVE_UNSAFE_ENTRY
        assert not (tmp_path / "escape.txt").exists()
        # entries written before the failure stay
        assert (tmp_path / "out" / "ok.txt").exists()

    def test_tar_link_outside_destination_rejected(self, tmp_path: Path) -> None:
        source = tmp_path / "evil.tar"
        with tarfile.open(source, "w") as tf:
            info = tarfile.TarInfo("passwd")
            info.type = tarfile.SYMTYPE
            info.linkname = "/etc/passwd"
            tf.addfile(info)

        with pytest.raises(ArchiveError) as exc_info:
            archive.extract(source, tmp_path / "out")

        assert exc_info.value.code == ErrorCode.ARCHIVE_EXTRACT_FAILED
        assert not os.path.lexists(tmp_path / "out" / "passwd")

    def test_corrupt_zip(self, tmp_path: Path) -> None:
        source = tmp_path / "broken.zip"
        source.write_bytes(b"not a zip at all")

        with pytest.raises(ArchiveError) as exc_info:
            archive.extract(source, tmp_path / "out")
        assert exc_info.value.code == ErrorCode.ARCHIVE_EXTRACT_FAILED

    def test_unsupported_format(self, tmp_path: Path) -> None:
        source = tmp_path / "movie.mkv"
        source.write_bytes(b"\x1a\x45\xdf\xa3")

        with pytest.raises(ArchiveError) as exc_info:
            archive.extract(source, tmp_path / "out")
        assert exc_info.value.code == ErrorCode.ARCHIVE_UNSUPPORTED_FORMAT

    def test_count_entries(self, tmp_path: Path) -> None:
        zipped = _make_zip(tmp_path / "p.zip", {"a": "1", "b": "2", "c": "3"})
        tarred = _make_tar(tmp_path / "p.tar", {"a": "1"}, mode="w")

        assert archive.count_entries(zipped) == 3
        assert archive.count_entries(tarred) == 1


class TestCompress:
    def test_directory(self, tmp_path: Path) -> None:
        source = tmp_path / "project"
        (source / "src").mkdir(parents=True)
        (source / "empty").mkdir()
        (source / "README").write_text("r")
        (source / "src" / "main.py").write_text("m")
        seen: list[str] = []

        archive.compress(source, tmp_path / "project.zip", seen.append)

        with zipfile.ZipFile(tmp_path / "project.zip") as zf:
            names = set(zf.namelist())
            assert zf.read("project/src/main.py") == b"m"
        assert names == {"project/README", "project/src/main.py", "project/empty/"}
        assert sorted(seen) == ["project/README", "project/src/main.py"]

    def test_single_file(self, tmp_path: Path) -> None:
        source = tmp_path / "a.txt"
        source.write_text("hello")

        archive.compress(source, tmp_path / "a.zip")

        with zipfile.ZipFile(tmp_path / "a.zip") as zf:
            assert zf.namelist() == ["a.txt"]
            assert zf.read("a.txt") == b"hello"

    def test_missing_source(self, tmp_path: Path) -> None:
        with pytest.raises(ArchiveError) as exc_info:
            archive.compress(tmp_path / "gone", tmp_path / "gone.zip")
        assert exc_info.value.code == ErrorCode.FILE_NOT_FOUND
        assert not (tmp_path / "gone.zip").exists()

    def test_partial_archive_removed_on_failure(self, tmp_path: Path, mocker) -> None:
        source = tmp_path / "d"
        source.mkdir()
        (source / "f").write_text("x")
        mocker.patch.object(zipfile.ZipFile, "write", side_effect=OSError("disk full"))

        with pytest.raises(ArchiveError) as exc_info:
            archive.compress(source, tmp_path / "d.zip")
        assert exc_info.value.code == ErrorCode.ARCHIVE_COMPRESS_FAILED
        assert not (tmp_path / "d.zip").exists()

    def test_default_zip_name(self, tmp_path: Path) -> None:
        assert archive.default_zip_name(tmp_path / "notes.txt") == tmp_path / "notes.zip"
        assert archive.default_zip_name(tmp_path / "folder") == tmp_path / "folder.zip"

    def test_symlinks_stored_as_links(self, tmp_path: Path) -> None:
        source = tmp_path / "proj"
        (source / "real").mkdir(parents=True)
        (source / "real" / "f.txt").write_text("f")
        (source / "link_to_dir").symlink_to("real")
        (source / "dangling").symlink_to("missing")
        seen: list[str] = []

        archive.compress(source, tmp_path / "proj.zip", seen.append)

        with zipfile.ZipFile(tmp_path / "proj.zip") as zf:
            assert sorted(zf.namelist()) == ["proj/dangling", "proj/link_to_dir", "proj/real/f.txt"]
            assert zf.read("proj/link_to_dir") == b"real"
            assert zf.read("proj/dangling") == b"missing"
        assert len(seen) == 3

    def test_links_restored_on_extract(self, tmp_path: Path) -> None:
        source = tmp_path / "proj"
        (source / "real").mkdir(parents=True)
        (source / "real" / "f.txt").write_text("f")
        (source / "link_to_dir").symlink_to("real")
        archive.compress(source, tmp_path / "proj.zip")

        archive.extract(tmp_path / "proj.zip", tmp_path / "out")

        link = tmp_path / "out" / "proj" / "link_to_dir"
        assert link.is_symlink()
        assert (link / "f.txt").read_text() == "f"

    def test_link_leaving_destination_rejected(self, tmp_path: Path) -> None:
        info = zipfile.ZipInfo("escape")
        info.external_attr = (stat.S_IFLNK | 0o777) << 16
        with zipfile.ZipFile(tmp_path / "evil.zip", "w") as zf:
            zf.writestr(info, "../../etc")

        with pytest.raises(ArchiveError) as exc_info:
            archive.extract(tmp_path / "evil.zip", tmp_path / "out")

        assert exc_info.value.code == ErrorCode.ARCHIVE_UNSAFE_ENTRY
        assert not os.path.lexists(tmp_path / "out" / "escape")
