"""Recursive directory size aggregation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

from fsscan.entry import EntryKind, classify
from fsscan.fs import DirectoryLister, list_directory

logger = logging.getLogger(__name__)


class SizeResult(NamedTuple):
    """Aggregated apparent size of a directory tree.

    ``total`` is a lower bound whenever ``had_errors`` is set.
    """

    total: int
    had_errors: bool


def compute_size(path: Path, lister: DirectoryLister | None = None) -> SizeResult:
    """Sum the apparent sizes of all regular files under ``path``.

    The whole subtree is visited regardless of any display depth limit.
    Symlinks and special files contribute nothing and symlinks are never
    followed. Unlistable directories and unreadable entries contribute
    nothing and set ``had_errors``.

    Args:
        path: Directory whose contents are summed.
        lister: Directory lister. Defaults to the real filesystem.

    Returns:
        SizeResult: Total bytes and whether any part could not be read.
    """
    list_dir = lister or list_directory
    total = 0
    had_errors = False

    def _on_error(child: Path, exc: OSError) -> None:
        nonlocal had_errors
        had_errors = True

    stack: list[Path] = [path]
    while stack:
        current = stack.pop()
        try:
            children = list_dir(current, _on_error)
        except OSError:
            logger.debug("Cannot list while sizing %s: %s", path, current)
            had_errors = True
            continue

        for child in children:
            kind = classify(child)
            if kind is EntryKind.REGULAR_FILE:
                total += child.size
            elif kind is EntryKind.DIRECTORY:
                stack.append(child.path)

    return SizeResult(total, had_errors)
