"""Tests for filesystem enumeration."""

import os
from pathlib import Path

import pytest

from daysync.scanner.filesystem import EnumerationError, LocalFileSource, walk_directory


class TestWalkDirectory:
    """Tests for walk_directory function."""

    def test_walks_empty_directory(self, tmp_path: Path):
        assert list(walk_directory(tmp_path)) == []

    def test_relative_paths_use_forward_slashes(self, tmp_path: Path):
        nested = tmp_path / "2025-4-11 - Villa" / "Data Dump"
        nested.mkdir(parents=True)
        (nested / "run1.xrk").write_bytes(b"\x00" * 16)

        entries = list(walk_directory(tmp_path))

        assert [e.relative_path for e in entries] == ["2025-4-11 - Villa/Data Dump/run1.xrk"]
        assert entries[0].size == 16
        assert entries[0].filename == "run1.xrk"

    def test_files_before_subdirectories_in_name_order(self, tmp_path: Path):
        (tmp_path / "b").mkdir()
        (tmp_path / "a").mkdir()
        (tmp_path / "b" / "z.txt").write_text("z")
        (tmp_path / "a" / "y.txt").write_text("y")
        (tmp_path / "root.txt").write_text("r")

        paths = [e.relative_path for e in walk_directory(tmp_path)]

        assert paths == ["root.txt", "a/y.txt", "b/z.txt"]

    def test_skips_symlinks(self, tmp_path: Path):
        real_file = tmp_path / "real.xrk"
        real_file.write_text("real")
        (tmp_path / "link.xrk").symlink_to(real_file)

        paths = [e.relative_path for e in walk_directory(tmp_path)]

        assert paths == ["real.xrk"]

    def test_records_modified_time(self, tmp_path: Path):
        file = tmp_path / "run.xrk"
        file.write_text("x")
        os.utime(file, (1_700_000_000, 1_700_000_000))

        entries = list(walk_directory(tmp_path))

        assert entries[0].modified_at == 1_700_000_000


class TestLocalFileSource:
    """Tests for LocalFileSource class."""

    def test_missing_root_raises(self, tmp_path: Path):
        source = LocalFileSource(tmp_path / "missing")
        with pytest.raises(EnumerationError):
            source.list_files()

    def test_file_root_raises(self, tmp_path: Path):
        file = tmp_path / "file.txt"
        file.write_text("x")
        with pytest.raises(EnumerationError):
            LocalFileSource(file).list_files()

    def test_empty_root_is_not_an_error(self, tmp_path: Path):
        assert LocalFileSource(tmp_path).list_files() == []

    def test_read_text(self, tmp_path: Path):
        setups = tmp_path / "Setups"
        setups.mkdir()
        (setups / "baseline.json").write_text('{"name": "Baseline"}')

        source = LocalFileSource(tmp_path)

        assert source.read_text("Setups/baseline.json") == '{"name": "Baseline"}'
