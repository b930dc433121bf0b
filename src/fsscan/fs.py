"""Metadata reader: turn paths and directory listings into descriptors."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from fsscan.entry import EntryDescriptor

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Path, OSError], None]


class DirectoryLister(Protocol):
    """Protocol for directory listing.

    Keeps traversal and size logic decoupled from the real filesystem.
    """

    def __call__(
        self, path: Path, on_error: ErrorCallback | None = None
    ) -> list[EntryDescriptor]: ...


def describe_error(exc: BaseException) -> str:
    """Return a short human-readable reason for a filesystem error."""
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror.lower()
    return str(exc) or type(exc).__name__


def _describe(path: Path, name: str, st: os.stat_result) -> EntryDescriptor:
    """Build a descriptor from an ``lstat`` result.

    Symlink targets are resolved strictly; a broken or cyclic link keeps
    ``link_target`` unset and records the reason instead.
    """
    is_symlink = stat.S_ISLNK(st.st_mode)
    link_target: Path | None = None
    link_error: str | None = None
    target_is_dir = False

    if is_symlink:
        try:
            link_target = path.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            # RuntimeError: symlink loop on Python < 3.13
            logger.debug("Cannot resolve symlink: %s", path)
            link_error = describe_error(exc)
        else:
            target_is_dir = link_target.is_dir()

    return EntryDescriptor(
        name=name,
        path=path,
        mode=st.st_mode,
        size=st.st_size,
        mtime=st.st_mtime,
        is_symlink=is_symlink,
        link_target=link_target,
        link_error=link_error,
        target_is_dir=target_is_dir,
    )


def read_entry(path: Path) -> EntryDescriptor:
    """Read metadata for a single path without following symlinks.

    Args:
        path: Path to inspect.

    Returns:
        EntryDescriptor: Descriptor for ``path``.

    Raises:
        OSError: If the path cannot be stat'ed.
    """
    st = os.lstat(path)
    return _describe(Path(path), Path(path).name, st)


def list_directory(
    path: Path, on_error: ErrorCallback | None = None
) -> list[EntryDescriptor]:
    """List a directory's children sorted by name.

    Args:
        path: Directory to list.
        on_error: Called with ``(child_path, exc)`` for each child whose
            metadata cannot be read. Such children are skipped.

    Returns:
        list[EntryDescriptor]: Child descriptors in name order.

    Raises:
        OSError: If the directory itself cannot be listed.
    """
    with os.scandir(path) as it:
        raw_entries = list(it)

    # Sort entries by name for deterministic output
    raw_entries.sort(key=lambda e: e.name)

    descriptors: list[EntryDescriptor] = []
    for dir_entry in raw_entries:
        child_path = Path(dir_entry.path)
        try:
            st = dir_entry.stat(follow_symlinks=False)
        except OSError as exc:
            logger.debug("Cannot stat: %s", child_path)
            if on_error is not None:
                on_error(child_path, exc)
            continue
        descriptors.append(_describe(child_path, dir_entry.name, st))

    return descriptors
