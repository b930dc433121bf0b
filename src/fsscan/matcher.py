"""Entry name matching: exact, exact-without-extension, and substring."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MatchMode(Enum):
    """How a search pattern is compared against entry names."""

    EXACT = "exact"
    EXACT_NOEXT = "noext"
    CONTAINS = "contains"


def strip_extension(name: str) -> str:
    """Remove the last extension segment from a name.

    Only the final ``.`` separates the extension, and a ``.`` in first
    position never does, so ``report.tar.gz`` becomes ``report.tar`` and
    ``.bashrc`` is returned unchanged.

    Args:
        name: Entry name.

    Returns:
        str: Name without its extension.
    """
    dot = name.rfind(".")
    if dot <= 0:
        return name
    return name[:dot]


def matches(mode: MatchMode, pattern: str, name: str) -> bool:
    """Return whether ``name`` qualifies under ``mode`` and ``pattern``.

    Comparison is case-sensitive in every mode.

    Args:
        mode: Matching mode.
        pattern: Pattern supplied by the user.
        name: Entry basename.

    Returns:
        bool: ``True`` when the name matches.
    """
    if mode is MatchMode.EXACT:
        return name == pattern
    if mode is MatchMode.EXACT_NOEXT:
        return strip_extension(name) == pattern
    return pattern in name


@dataclass(frozen=True, slots=True)
class NameMatcher:
    """A single active ``(mode, pattern)`` pair.

    Attributes:
        mode: Matching mode.
        pattern: Pattern compared against entry names.
    """

    mode: MatchMode
    pattern: str

    def matches(self, name: str) -> bool:
        return matches(self.mode, self.pattern, name)
