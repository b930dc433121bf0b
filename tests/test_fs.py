"""Tests for fsscan.fs — the real-filesystem metadata reader."""

import os
from pathlib import Path

import pytest

from fsscan.entry import EntryKind, classify
from fsscan.fs import list_directory, read_entry


class TestReadEntry:
    def test_regular_file(self, sample_tree: Path) -> None:
        descriptor = read_entry(sample_tree / "b.txt")
        assert descriptor.name == "b.txt"
        assert descriptor.size == 12
        assert classify(descriptor) is EntryKind.REGULAR_FILE

    def test_symlink_is_not_followed(self, sample_tree: Path) -> None:
        descriptor = read_entry(sample_tree / "link")
        assert descriptor.is_symlink is True
        assert classify(descriptor) is EntryKind.SYMLINK
        assert descriptor.link_target == (sample_tree / "docs").resolve()
        assert descriptor.target_is_dir is True

    def test_broken_symlink_records_error(self, tmp_path: Path) -> None:
        (tmp_path / "dangling").symlink_to(tmp_path / "missing")
        descriptor = read_entry(tmp_path / "dangling")
        assert descriptor.link_target is None
        assert descriptor.link_error

    def test_symlink_cycle_records_error(self, tmp_path: Path) -> None:
        (tmp_path / "one").symlink_to(tmp_path / "two")
        (tmp_path / "two").symlink_to(tmp_path / "one")
        descriptor = read_entry(tmp_path / "one")
        assert descriptor.link_target is None
        assert descriptor.link_error

    def test_missing_path_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_entry(tmp_path / "nope")


class TestListDirectory:
    def test_sorted_by_name(self, sample_tree: Path) -> None:
        names = [d.name for d in list_directory(sample_tree)]
        assert names == ["a", "b.txt", "docs", "link", "report.tar.gz"]

    def test_paths_are_children_of_listed_dir(self, sample_tree: Path) -> None:
        for descriptor in list_directory(sample_tree / "docs"):
            assert descriptor.path.parent == sample_tree / "docs"

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            list_directory(tmp_path / "nope")

    def test_file_raises_not_a_directory(self, sample_tree: Path) -> None:
        with pytest.raises(NotADirectoryError):
            list_directory(sample_tree / "b.txt")

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="no FIFO support")
    def test_fifo_is_special(self, fifo_tree: Path) -> None:
        kinds = {d.name: classify(d) for d in list_directory(fifo_tree)}
        assert kinds == {
            "dir": EntryKind.DIRECTORY,
            "file.txt": EntryKind.REGULAR_FILE,
            "link": EntryKind.SYMLINK,
            "pipe": EntryKind.SPECIAL,
        }
