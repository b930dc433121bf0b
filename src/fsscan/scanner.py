"""Traversal engine: lazy depth-first walk producing display records."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Literal

from fsscan import RootAccessError
from fsscan.config import ScanConfig
from fsscan.entry import (
    EntryDescriptor,
    EntryKind,
    SpecialType,
    classify,
    special_type,
)
from fsscan.fs import DirectoryLister, describe_error, list_directory
from fsscan.gitignore import IgnoreRules
from fsscan.sizing import compute_size

logger = logging.getLogger(__name__)

Operation = Literal["list", "stat", "link", "size"]


@dataclass(frozen=True, slots=True)
class EntryError:
    """A recoverable, entry-scoped failure.

    Attributes:
        path: Entry the failure belongs to.
        operation: What was being done: ``list`` a directory, ``stat`` an
            entry, resolve a ``link`` target, or aggregate a ``size``.
        message: Short human-readable reason.
    """

    path: Path
    operation: Operation
    message: str

    @property
    def reason(self) -> str:
        """Failure description without the path."""
        return f"{_OPERATION_TEXT[self.operation]}: {self.message}"

    def describe(self) -> str:
        return f"{_OPERATION_TEXT[self.operation]} '{self.path}': {self.message}"


_OPERATION_TEXT: dict[str, str] = {
    "list": "cannot list directory",
    "stat": "cannot read metadata",
    "link": "cannot resolve symlink target",
    "size": "size may be incomplete",
}


@dataclass(frozen=True, slots=True)
class DisplayRecord:
    """One output unit per visited entry.

    Attributes:
        path: Absolute path of the entry.
        name: Basename of the entry.
        depth: Number of directory traversals from the scan root
            (root's children are depth 1).
        kind: Entry kind.
        size: Apparent size for regular files; aggregated size for
            directories when sizes were requested; otherwise ``None``.
        permissions: Permission string when requested.
        modified: Modification time when requested.
        special_type: Sub-type for special entries.
        link_target: Resolved target for symlinks.
        target_is_dir: Whether a symlink points at a directory.
        error: Recoverable failure attached to this entry.
    """

    path: Path
    name: str
    depth: int
    kind: EntryKind
    size: int | None = None
    permissions: str | None = None
    modified: datetime | None = None
    special_type: SpecialType | None = None
    link_target: Path | None = None
    target_is_dir: bool = False
    error: EntryError | None = None

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


@dataclass(slots=True)
class EntryCounts:
    """Per-kind entry counters."""

    files: int = 0
    symlinks: int = 0
    special: int = 0
    dirs: int = 0

    def add(self, kind: EntryKind) -> None:
        if kind is EntryKind.REGULAR_FILE:
            self.files += 1
        elif kind is EntryKind.SYMLINK:
            self.symlinks += 1
        elif kind is EntryKind.SPECIAL:
            self.special += 1
        else:
            self.dirs += 1

    @property
    def total(self) -> int:
        return self.files + self.symlinks + self.special + self.dirs


@dataclass(slots=True)
class ScanStats:
    """Counters and errors accumulated while a walk is consumed.

    Attributes:
        top_level: Kinds of the root's direct children.
        traversed: Kinds of every entry enumerated.
        shown: Kinds of every emitted record.
        errors: Every recoverable error, in discovery order.
        unattached: Errors not carried by any emitted record.
    """

    top_level: EntryCounts = field(default_factory=EntryCounts)
    traversed: EntryCounts = field(default_factory=EntryCounts)
    shown: EntryCounts = field(default_factory=EntryCounts)
    errors: list[EntryError] = field(default_factory=list)
    unattached: list[EntryError] = field(default_factory=list)

    def add_error(self, error: EntryError, attached: bool) -> None:
        self.errors.append(error)
        if not attached:
            self.unattached.append(error)


@dataclass(frozen=True, slots=True)
class HiddenSummary:
    """Aggregate row standing in for a directory's hidden entries of one kind.

    Attributes:
        directory: Directory whose children are summarised.
        depth: Depth of those children.
        kind: Kind of the hidden entries.
        count: Number of hidden entries.
        size: Total apparent size of the hidden regular files, set only
            for files when directory sizes were requested.
    """

    directory: Path
    depth: int
    kind: EntryKind
    count: int
    size: int | None = None


WalkItem = DisplayRecord | HiddenSummary


@dataclass(slots=True)
class _HiddenTally:
    """Hidden children of one directory, counted while it is enumerated."""

    files: int = 0
    file_bytes: int = 0
    symlinks: int = 0
    special: int = 0

    def add(self, entry: EntryDescriptor, kind: EntryKind) -> None:
        if kind is EntryKind.REGULAR_FILE:
            self.files += 1
            self.file_bytes += entry.size
        elif kind is EntryKind.SYMLINK:
            self.symlinks += 1
        elif kind is EntryKind.SPECIAL:
            self.special += 1

    def summaries(
        self, directory: Path, depth: int, with_size: bool
    ) -> list[HiddenSummary]:
        rows = []
        if self.files:
            size = self.file_bytes if with_size else None
            rows.append(
                HiddenSummary(directory, depth, EntryKind.REGULAR_FILE, self.files, size)
            )
        if self.symlinks:
            rows.append(HiddenSummary(directory, depth, EntryKind.SYMLINK, self.symlinks))
        if self.special:
            rows.append(HiddenSummary(directory, depth, EntryKind.SPECIAL, self.special))
        return rows


def _is_visible(kind: EntryKind, config: ScanConfig) -> bool:
    """Apply kind visibility flags. Directories are always visible."""
    if kind is EntryKind.REGULAR_FILE:
        return config.show_files
    if kind is EntryKind.SYMLINK:
        return config.show_symlinks
    if kind is EntryKind.SPECIAL:
        return config.show_special
    return True


def _build_record(
    config: ScanConfig,
    entry: EntryDescriptor,
    kind: EntryKind,
    depth: int,
    error: EntryError | None,
    list_dir: DirectoryLister,
) -> DisplayRecord:
    """Create the display record for one visible, matching entry."""
    size: int | None = None
    if kind is EntryKind.REGULAR_FILE:
        size = entry.size
    elif kind is EntryKind.DIRECTORY and config.dir_sizes:
        result = compute_size(entry.path, list_dir)
        size = result.total
        if result.had_errors and error is None:
            error = EntryError(
                entry.path, "size", "some entries could not be read"
            )
    elif kind is EntryKind.SYMLINK and entry.link_error is not None:
        error = EntryError(entry.path, "link", entry.link_error)

    return DisplayRecord(
        path=entry.path,
        name=entry.name,
        depth=depth,
        kind=kind,
        size=size,
        permissions=entry.permissions if config.show_permissions else None,
        modified=entry.modified if config.show_mtime else None,
        special_type=special_type(entry) if kind is EntryKind.SPECIAL else None,
        link_target=entry.link_target,
        target_is_dir=entry.target_is_dir,
        error=error,
    )


def _walk(
    config: ScanConfig,
    root_children: list[EntryDescriptor],
    list_dir: DirectoryLister,
    stats: ScanStats,
    ignore_rules: IgnoreRules | None,
) -> Iterator[WalkItem]:
    """Generate records depth-first, pre-order, siblings in name order.

    With ``config.hidden_summaries`` set, each listed directory's hidden
    entries are reported after its last child as ``HiddenSummary`` rows.
    """

    def _on_stat_error(path: Path, exc: OSError) -> None:
        stats.add_error(EntryError(path, "stat", describe_error(exc)), False)

    # Stack items: (remaining children, their depth, their parent, hidden tally)
    stack: list[tuple[Iterator[EntryDescriptor], int, Path, _HiddenTally]] = [
        (iter(root_children), 1, config.root, _HiddenTally())
    ]

    while stack:
        children, depth, parent, tally = stack[-1]
        entry = next(children, None)
        if entry is None:
            stack.pop()
            if config.hidden_summaries:
                yield from tally.summaries(parent, depth, config.dir_sizes)
            continue

        kind = classify(entry)
        is_dir = kind is EntryKind.DIRECTORY

        if ignore_rules is not None and ignore_rules.is_ignored(entry.path, is_dir):
            logger.debug("Ignored by .gitignore: %s", entry.path)
            continue

        stats.traversed.add(kind)
        if depth == 1:
            stats.top_level.add(kind)

        if not _is_visible(kind, config):
            tally.add(entry, kind)
            continue

        grandchildren: list[EntryDescriptor] | None = None
        error: EntryError | None = None
        # Depth limit check: a directory at max_depth is displayed as a leaf
        if is_dir and (config.max_depth is None or depth < config.max_depth):
            try:
                grandchildren = list_dir(entry.path, _on_stat_error)
            except OSError as exc:
                logger.debug("Cannot list: %s", entry.path)
                error = EntryError(entry.path, "list", describe_error(exc))

        # Non-matching directories are still descended into
        if config.matcher is None or config.matcher.matches(entry.name):
            record = _build_record(config, entry, kind, depth, error, list_dir)
            stats.shown.add(kind)
            if record.error is not None:
                stats.add_error(record.error, True)
            yield record
        elif error is not None:
            stats.add_error(error, False)

        if grandchildren is not None:
            if ignore_rules is not None:
                ignore_rules.enter(entry.path)
            stack.append((iter(grandchildren), depth + 1, entry.path, _HiddenTally()))


def walk(
    config: ScanConfig,
    stats: ScanStats | None = None,
    lister: DirectoryLister | None = None,
) -> Iterator[WalkItem]:
    """Walk the tree under ``config.root`` and lazily yield display records.

    The root is listed eagerly so that an inaccessible root fails here,
    before any record is produced. Everything below the root is read on
    demand as the returned iterator is consumed.

    Args:
        config: Validated scan configuration.
        stats: Optional accumulator updated as records are produced.
        lister: Directory lister. Defaults to the real filesystem.

    Returns:
        Iterator[WalkItem]: Records in depth-first, name-sorted order,
        interleaved with ``HiddenSummary`` rows when
        ``config.hidden_summaries`` is set.

    Raises:
        RootAccessError: If the root does not exist, is not a directory,
            or cannot be listed.
    """
    list_dir = lister or list_directory
    scan_stats = stats if stats is not None else ScanStats()
    root = config.root

    def _on_stat_error(path: Path, exc: OSError) -> None:
        scan_stats.add_error(EntryError(path, "stat", describe_error(exc)), False)

    try:
        root_children = list_dir(root, _on_stat_error)
    except FileNotFoundError as exc:
        raise RootAccessError(f"'{root}' does not exist") from exc
    except NotADirectoryError as exc:
        raise RootAccessError(f"'{root}' is not a directory") from exc
    except OSError as exc:
        raise RootAccessError(
            f"cannot list '{root}': {describe_error(exc)}"
        ) from exc

    if config.max_depth == 0:
        return iter(())

    ignore_rules: IgnoreRules | None = None
    if config.gitignore:
        ignore_rules = IgnoreRules()
        ignore_rules.enter(root)
    return _walk(config, root_children, list_dir, scan_stats, ignore_rules)
