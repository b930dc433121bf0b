"""Gitignore integration: skip entries ignored by ``.gitignore`` files.

Every directory the walk enters may carry its own ``.gitignore``; its
patterns apply to paths below that directory, the way git reads nested
ignore files.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pathspec import GitIgnoreSpec

logger = logging.getLogger(__name__)

GITIGNORE_NAME = ".gitignore"


def load_gitignore_spec(directory: Path) -> GitIgnoreSpec | None:
    """Compile the ``.gitignore`` found directly in ``directory``.

    Args:
        directory: Directory that may hold a ``.gitignore`` file.

    Returns:
        A compiled spec, or ``None`` when the file is missing, unreadable
        or holds nothing but blank lines and comments.
    """
    path = directory / GITIGNORE_NAME
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError:
        return None
    except OSError:
        logger.debug("Cannot read %s", path)
        return None

    patterns = [
        line for line in text.splitlines() if line.strip() and not line.startswith("#")
    ]
    if not patterns:
        return None
    logger.debug("Loaded %d patterns from %s", len(patterns), path)
    return GitIgnoreSpec.from_lines(patterns)


def is_ignored(spec: GitIgnoreSpec, base: Path, path: Path, is_dir: bool) -> bool:
    """Return whether ``path`` is ignored by ``spec``.

    Args:
        spec: Compiled gitignore spec.
        base: Directory the spec's patterns are relative to.
        path: Absolute entry path under ``base``.
        is_dir: Whether the entry is a directory; directory-only
            patterns (``build/``) only match when set.

    Returns:
        bool: ``True`` when the entry should be skipped.
    """
    try:
        rel = path.relative_to(base).as_posix()
    except ValueError:
        return False
    if is_dir:
        rel += "/"
    return spec.match_file(rel)


class IgnoreRules:
    """Ignore specs of the directories entered so far, keyed by directory."""

    def __init__(self) -> None:
        self._specs: dict[Path, GitIgnoreSpec] = {}

    def enter(self, directory: Path) -> None:
        """Pick up the ``.gitignore`` of a directory about to be walked."""
        spec = load_gitignore_spec(directory)
        if spec is not None:
            self._specs[directory] = spec

    def is_ignored(self, path: Path, is_dir: bool) -> bool:
        """Return whether any enclosing directory's ``.gitignore`` ignores ``path``."""
        if not self._specs:
            return False
        return any(
            is_ignored(self._specs[parent], parent, path, is_dir)
            for parent in path.parents
            if parent in self._specs
        )
