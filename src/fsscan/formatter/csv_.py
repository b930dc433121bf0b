"""CSV output formatter for fss.

Columns are defined as ``CsvColumn`` instances that pair a header with an
extraction callable, so callers can reorder or trim the column set by
passing their own list to ``format_csv``.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Callable

from fsscan.scanner import DisplayRecord


@dataclass(frozen=True, slots=True)
class CsvColumn:
    """A single CSV output column.

    Attributes:
        name: Header name for this column.
        extract: Callable that takes a record and returns its cell value.
    """

    name: str
    extract: Callable[[DisplayRecord], str]


def _extract_depth(record: DisplayRecord) -> str:
    return str(record.depth)


def _extract_kind(record: DisplayRecord) -> str:
    return record.kind.value


def _extract_name(record: DisplayRecord) -> str:
    return record.name


def _extract_path(record: DisplayRecord) -> str:
    return str(record.path)


def _extract_size(record: DisplayRecord) -> str:
    return "" if record.size is None else str(record.size)


def _extract_permissions(record: DisplayRecord) -> str:
    return record.permissions or ""


def _extract_modified(record: DisplayRecord) -> str:
    return record.modified.isoformat(timespec="seconds") if record.modified else ""


def _extract_target(record: DisplayRecord) -> str:
    return str(record.link_target) if record.link_target else ""


def _extract_error(record: DisplayRecord) -> str:
    return record.error.reason if record.error else ""


DEFAULT_COLUMNS: list[CsvColumn] = [
    CsvColumn(name="depth", extract=_extract_depth),
    CsvColumn(name="kind", extract=_extract_kind),
    CsvColumn(name="name", extract=_extract_name),
    CsvColumn(name="path", extract=_extract_path),
    CsvColumn(name="size", extract=_extract_size),
    CsvColumn(name="permissions", extract=_extract_permissions),
    CsvColumn(name="modified", extract=_extract_modified),
    CsvColumn(name="target", extract=_extract_target),
    CsvColumn(name="error", extract=_extract_error),
]


@dataclass(frozen=True, slots=True)
class CsvOptions:
    """Options controlling CSV output.

    Attributes:
        columns: Column definitions to use. Defaults to ``DEFAULT_COLUMNS``.
        show_errors: When ``False`` the ``error`` column is left empty.
    """

    columns: list[CsvColumn] = field(default_factory=lambda: list(DEFAULT_COLUMNS))
    show_errors: bool = False


def format_csv(
    records: Iterable[DisplayRecord],
    options: CsvOptions | None = None,
) -> str:
    """Render records as CSV text.

    Output always starts with a header row; each subsequent row is one
    record. Empty cells stand for values that were not requested.

    Args:
        records: Records to render.
        options: Rendering options. Defaults to ``CsvOptions()``.

    Returns:
        str: CSV text with header, using LF line endings (no trailing newline).
    """
    opts = options or CsvOptions()
    columns = opts.columns

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    writer.writerow([col.name for col in columns])

    for record in records:
        row = []
        for col in columns:
            if col.name == "error" and not opts.show_errors:
                row.append("")
            else:
                row.append(col.extract(record))
        writer.writerow(row)

    # Remove trailing newline that csv.writer appends after the last row
    return buf.getvalue().rstrip("\n")
