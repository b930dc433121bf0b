"""Scan configuration and its validated construction."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fsscan import ConfigError
from fsscan.matcher import MatchMode, NameMatcher


@dataclass(frozen=True, slots=True)
class ScanConfig:
    """Options governing one scan.

    Attributes:
        root: Directory the scan starts from.
        max_depth: Deepest record depth to emit (root's children are
            depth 1). ``None`` means unlimited; ``0`` lists nothing.
        show_files: Whether regular files are emitted.
        show_symlinks: Whether symlinks are emitted.
        show_special: Whether sockets, FIFOs and devices are emitted.
        dir_sizes: Whether directory sizes are aggregated.
        show_permissions: Whether records carry permission strings.
        show_mtime: Whether records carry modification times.
        absolute: Whether paths are displayed absolute and unindented.
        show_errors: Whether per-entry errors are displayed.
        gitignore: Whether entries matched by ``.gitignore`` files are
            skipped.
        hidden_summaries: Whether each listed directory reports its
            hidden entries as aggregate rows after its children.
        matcher: Active name matcher, if any.
    """

    root: Path
    max_depth: int | None = 1
    show_files: bool = False
    show_symlinks: bool = False
    show_special: bool = False
    dir_sizes: bool = False
    show_permissions: bool = False
    show_mtime: bool = False
    absolute: bool = False
    show_errors: bool = False
    gitignore: bool = False
    hidden_summaries: bool = False
    matcher: NameMatcher | None = None

    def __post_init__(self) -> None:
        if self.max_depth is not None and self.max_depth < 0:
            raise ConfigError("Invalid depth, must not be negative.")

    @property
    def recursive(self) -> bool:
        return self.max_depth is None or self.max_depth > 1


def parse_depth(text: str) -> int:
    """Parse a ``--recursive`` depth argument.

    Args:
        text: Raw argument text.

    Returns:
        int: Non-negative recursion depth.

    Raises:
        ConfigError: If the text is not a non-negative integer.
    """
    try:
        depth = int(text)
    except ValueError as exc:
        raise ConfigError(f"Invalid depth '{text}', must be an integer.") from exc
    if depth < 0:
        raise ConfigError(f"Invalid depth '{text}', must not be negative.")
    return depth


def build_config(
    root: Path,
    *,
    search: str | None = None,
    search_noext: str | None = None,
    contains: str | None = None,
    **flags: object,
) -> ScanConfig:
    """Build a validated ``ScanConfig``.

    At most one of the three search patterns may be given.

    Args:
        root: Scan root.
        search: Pattern for exact name matching.
        search_noext: Pattern for exact matching without extension.
        contains: Pattern for substring matching.
        **flags: Remaining ``ScanConfig`` fields.

    Returns:
        ScanConfig: Immutable configuration.

    Raises:
        ConfigError: If several search modes are requested or a field
            value is invalid.
    """
    requested = [
        (mode, pattern)
        for mode, pattern in (
            (MatchMode.EXACT, search),
            (MatchMode.EXACT_NOEXT, search_noext),
            (MatchMode.CONTAINS, contains),
        )
        if pattern is not None
    ]
    if len(requested) > 1:
        raise ConfigError("Can only set one search mode at a time.")

    matcher = NameMatcher(*requested[0]) if requested else None
    try:
        return ScanConfig(root=root, matcher=matcher, **flags)  # type: ignore[arg-type]
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
