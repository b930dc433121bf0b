"""Shared fixtures for fsscan tests."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from fsscan.entry import EntryDescriptor
from fsscan.fs import ErrorCallback

FAKE_ROOT = Path("/fake/root")


class FakeFilesystem:
    """In-memory directory lister for states hard to build on disk.

    Paths are given relative to ``FAKE_ROOT``. Listing a denied directory
    raises ``PermissionError``; children registered as unreadable are
    reported through ``on_error`` and skipped.
    """

    def __init__(self) -> None:
        self.root = FAKE_ROOT
        self._children: dict[Path, list[EntryDescriptor]] = {self.root: []}
        self._denied: set[Path] = set()
        self._unreadable: dict[Path, list[Path]] = {}
        self.calls: list[Path] = []

    def _add(self, rel: str, mode: int, **fields: object) -> EntryDescriptor:
        path = self.root / rel
        descriptor = EntryDescriptor(name=path.name, path=path, mode=mode, **fields)  # type: ignore[arg-type]
        self._children.setdefault(path.parent, []).append(descriptor)
        return descriptor

    def add_dir(self, rel: str, perms: int = 0o755) -> EntryDescriptor:
        descriptor = self._add(rel, stat.S_IFDIR | perms)
        self._children.setdefault(descriptor.path, [])
        return descriptor

    def add_file(self, rel: str, size: int, perms: int = 0o644) -> EntryDescriptor:
        return self._add(rel, stat.S_IFREG | perms, size=size)

    def add_symlink(
        self,
        rel: str,
        target: str | None = None,
        target_is_dir: bool = False,
    ) -> EntryDescriptor:
        return self._add(
            rel,
            stat.S_IFLNK | 0o777,
            size=42,
            is_symlink=True,
            link_target=self.root / target if target else None,
            link_error=None if target else "no such file or directory",
            target_is_dir=target_is_dir,
        )

    def add_special(self, rel: str, fmt: int = stat.S_IFSOCK) -> EntryDescriptor:
        return self._add(rel, fmt | 0o600)

    def deny(self, rel: str) -> None:
        self._denied.add(self.root / rel)

    def add_unreadable(self, rel: str) -> None:
        path = self.root / rel
        self._unreadable.setdefault(path.parent, []).append(path)

    def __call__(
        self, path: Path, on_error: ErrorCallback | None = None
    ) -> list[EntryDescriptor]:
        self.calls.append(path)
        if path in self._denied:
            raise PermissionError(13, "Permission denied", str(path))
        if path not in self._children:
            raise FileNotFoundError(2, "No such file or directory", str(path))
        for bad in self._unreadable.get(path, []):
            if on_error is not None:
                on_error(bad, PermissionError(13, "Permission denied", str(bad)))
        return sorted(self._children[path], key=lambda d: d.name)


@pytest.fixture
def fake_fs() -> FakeFilesystem:
    return FakeFilesystem()


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create a standard test directory tree.

    Structure::

        root/
        ├── a/                  (empty)
        ├── b.txt               (12 bytes)
        ├── docs/
        │   ├── deep/
        │   │   └── notes.txt   (10 bytes)
        │   └── guide.md        (5 bytes)
        ├── link -> docs
        └── report.tar.gz       (3 bytes)
    """
    (tmp_path / "a").mkdir()
    (tmp_path / "b.txt").write_bytes(b"x" * 12)
    (tmp_path / "docs" / "deep").mkdir(parents=True)
    (tmp_path / "docs" / "deep" / "notes.txt").write_bytes(b"n" * 10)
    (tmp_path / "docs" / "guide.md").write_bytes(b"guide")
    (tmp_path / "link").symlink_to(tmp_path / "docs", target_is_directory=True)
    (tmp_path / "report.tar.gz").write_bytes(b"gz!")
    return tmp_path


@pytest.fixture
def fifo_tree(tmp_path: Path) -> Path:
    """Tree with one directory, one file, one symlink and one FIFO."""
    if not hasattr(os, "mkfifo"):
        pytest.skip("FIFOs not supported on this platform")
    (tmp_path / "dir").mkdir()
    (tmp_path / "file.txt").write_text("file")
    (tmp_path / "link").symlink_to(tmp_path / "file.txt")
    os.mkfifo(tmp_path / "pipe")
    return tmp_path
