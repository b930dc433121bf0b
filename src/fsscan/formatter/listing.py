"""Column listing formatter: indented tree or absolute paths."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from fsscan.config import ScanConfig
from fsscan.entry import EntryKind
from fsscan.scanner import (
    DisplayRecord,
    EntryCounts,
    HiddenSummary,
    ScanStats,
    WalkItem,
)

SIZE_WIDTH = 20
TIME_WIDTH = 20
INDENT_WIDTH = 4
TIME_FORMAT = "%b %d %Y  %H:%M"
PERMISSIONS_WIDTH = 12

_HIDDEN_LABELS = {
    EntryKind.REGULAR_FILE: "files",
    EntryKind.SYMLINK: "symlinks",
    EntryKind.SPECIAL: "special entries",
}


@dataclass(frozen=True, slots=True)
class ListingOptions:
    """Options for the column listing.

    Attributes:
        show_permissions: Whether to print the permission column.
        show_mtime: Whether to print the modification time column.
        dir_sizes: Whether directory sizes were computed.
        absolute: Whether to print absolute paths without indentation.
        show_errors: Whether to print per-entry error markers.
    """

    show_permissions: bool = False
    show_mtime: bool = False
    dir_sizes: bool = False
    absolute: bool = False
    show_errors: bool = False

    @classmethod
    def from_config(cls, config: ScanConfig) -> ListingOptions:
        # Search matches are printed as full paths: their non-matching
        # parents are not listed.
        return cls(
            show_permissions=config.show_permissions,
            show_mtime=config.show_mtime,
            dir_sizes=config.dir_sizes,
            absolute=config.absolute or config.matcher is not None,
            show_errors=config.show_errors,
        )


def format_size(size: int) -> str:
    """Format a byte count with thousands separators."""
    return f"{size:,}"


def _size_column(record: DisplayRecord, opts: ListingOptions) -> str:
    """Return the right-aligned column text (size, kind label or marker)."""
    if record.kind is EntryKind.SYMLINK:
        return "SYMLINK"
    if record.kind is EntryKind.SPECIAL:
        return record.special_type.value if record.special_type else "SPECIAL"
    if record.size is None:
        return ""
    if record.kind is EntryKind.DIRECTORY and opts.show_errors and record.error:
        if record.error.operation == "list":
            return "ERROR"
        if record.error.operation == "size":
            return format_size(record.size) + "+"
    return format_size(record.size)


def _name_column(record: DisplayRecord, opts: ListingOptions) -> str:
    """Return the entry's display name, indented unless absolute."""
    name = str(record.path) if opts.absolute else record.name

    if record.kind is EntryKind.DIRECTORY:
        text = f"<{name}>"
    elif record.kind is EntryKind.SYMLINK:
        target = str(record.link_target) if record.link_target else "?"
        if record.target_is_dir:
            text = f"<{name}> -> <{target}>"
        else:
            text = f"{name} -> {target}"
    else:
        text = name

    if opts.absolute:
        return text
    return " " * (INDENT_WIDTH * (record.depth - 1)) + text


def format_record(record: DisplayRecord, options: ListingOptions | None = None) -> str:
    """Render one record as a listing line.

    Args:
        record: Record to render.
        options: Listing options.

    Returns:
        str: Single output line without trailing newline.
    """
    opts = options or ListingOptions()
    parts: list[str] = []

    if opts.show_permissions:
        parts.append(f"{record.permissions or '':<9}   ")
    if opts.show_mtime:
        stamp = record.modified.strftime(TIME_FORMAT) if record.modified else ""
        parts.append(f"{stamp:>{TIME_WIDTH}}")

    parts.append(f"{_size_column(record, opts):>{SIZE_WIDTH}}    ")
    parts.append(_name_column(record, opts))

    if opts.show_errors and record.error is not None:
        parts.append(f"  [error: {record.error.reason}]")

    return "".join(parts)


def format_hidden_summary(
    summary: HiddenSummary, options: ListingOptions | None = None
) -> str:
    """Render the aggregate row for a directory's hidden entries of one kind.

    The size column holds the hidden files' total size when directory
    sizes are shown, ``-`` for symlinks and special entries in that case,
    and is blank otherwise.
    """
    opts = options or ListingOptions()
    parts: list[str] = []

    if opts.show_permissions:
        parts.append(" " * PERMISSIONS_WIDTH)
    if opts.show_mtime:
        parts.append(" " * TIME_WIDTH)

    if summary.size is not None:
        size_text = format_size(summary.size)
    elif opts.dir_sizes:
        size_text = "-"
    else:
        size_text = ""
    parts.append(f"{size_text:>{SIZE_WIDTH}}    ")

    indent = " " * (INDENT_WIDTH * (summary.depth - 1))
    parts.append(f"{indent}<{format_size(summary.count)} {_HIDDEN_LABELS[summary.kind]}>")
    return "".join(parts)


def format_listing(
    records: Iterable[WalkItem],
    options: ListingOptions | None = None,
) -> Iterator[str]:
    """Lazily render records, one line per record.

    Args:
        records: Records (and hidden-entry summaries) in traversal order.
        options: Listing options.

    Yields:
        str: Rendered lines.
    """
    opts = options or ListingOptions()
    for record in records:
        if isinstance(record, HiddenSummary):
            yield format_hidden_summary(record, opts)
        else:
            yield format_record(record, opts)


def _counts_block(title: str, counts: EntryCounts) -> list[str]:
    return [
        title,
        f"<{format_size(counts.files)} files>",
        f"<{format_size(counts.symlinks)} symlinks>",
        f"<{format_size(counts.special)} special files>",
        f"<{format_size(counts.dirs)} subdirectories>",
        f"<{format_size(counts.total)} total entries>",
    ]


def format_summary(
    stats: ScanStats,
    root: Path,
    recursive: bool = False,
    search: bool = False,
) -> str:
    """Render the end-of-scan summary.

    In listing mode the root's direct children are summarised, followed by
    the whole traversal when the scan was recursive. In search mode the
    matching entries are summarised, followed by the whole traversal.

    Args:
        stats: Counters collected while the walk was consumed.
        root: Scan root.
        recursive: Whether the scan descended below the root's children.
        search: Whether a name pattern was active.

    Returns:
        str: Summary text, blocks separated by blank lines.
    """
    if search:
        blocks = [
            _counts_block("Summary of matching entries", stats.shown),
            _counts_block(f'Summary of traversal of "{root}"', stats.traversed),
        ]
    else:
        blocks = [_counts_block(f'Summary of "{root}"', stats.top_level)]
        if recursive:
            blocks.append(_counts_block("Including subdirectories", stats.traversed))

    return "\n\n".join("\n".join(block) for block in blocks)
