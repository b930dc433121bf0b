"""CLI entry point for fss — I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

from fsscan import ConfigError, FssError
from fsscan.config import ScanConfig, build_config, parse_depth
from fsscan.formatter.listing import ListingOptions, format_listing, format_summary
from fsscan.scanner import ScanStats, walk

# Sentinel for a bare ``-r`` (recurse without limit)
_UNLIMITED = ""


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``fss`` command.
    """
    parser = argparse.ArgumentParser(
        prog="fss",
        description="Scan through the filesystem starting from PATH.",
        epilog='Example: fss ".." --recursive --files',
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan (default: current directory)",
    )

    parser.add_argument(
        "-r",
        "--recursive",
        nargs="?",
        const=_UNLIMITED,
        default=None,
        metavar="DEPTH",
        dest="recursive",
        help=(
            "Recursively scan directories, optionally at most DEPTH levels "
            "below the listed entries (place PATH before this flag when "
            "no DEPTH is given)"
        ),
    )
    parser.add_argument(
        "-p",
        "--permissions",
        action="store_true",
        dest="show_permissions",
        help="Show permissions of all entries",
    )
    parser.add_argument(
        "-t",
        "--modification-time",
        action="store_true",
        dest="show_mtime",
        help="Show time of last modification of entries",
    )

    parser.add_argument(
        "-f",
        "--files",
        action="store_true",
        dest="show_files",
        help="Show regular files (normally hidden)",
    )
    parser.add_argument(
        "-l",
        "--symlinks",
        action="store_true",
        dest="show_symlinks",
        help="Show symlinks (normally hidden)",
    )
    parser.add_argument(
        "-s",
        "--special",
        action="store_true",
        dest="show_special",
        help="Show special files such as sockets, pipes, etc. (normally hidden)",
    )
    parser.add_argument(
        "-d",
        "--dir-size",
        action="store_true",
        dest="dir_sizes",
        help="Recursively calculate and display the size of each directory",
    )
    parser.add_argument(
        "-a",
        "--abs",
        action="store_true",
        dest="absolute",
        help="Show the absolute path of each entry without any indentation",
    )

    parser.add_argument(
        "-S",
        "--search",
        default=None,
        metavar="PATTERN",
        help="Only show entries whose name matches PATTERN completely",
    )
    parser.add_argument(
        "--search-noext",
        default=None,
        metavar="PATTERN",
        help="Only show entries whose name without extension matches PATTERN",
    )
    parser.add_argument(
        "--contains",
        default=None,
        metavar="PATTERN",
        help="Only show entries whose name contains PATTERN",
    )

    parser.add_argument(
        "-e",
        "--show-err",
        action="store_true",
        dest="show_errors",
        help="Show errors",
    )

    # fss extension options
    parser.add_argument(
        "--csv",
        action="store_true",
        dest="csv_mode",
        help="Output records as CSV",
    )
    parser.add_argument(
        "--gitignore",
        action="store_true",
        help="Skip entries ignored by .gitignore files under PATH",
    )
    parser.add_argument(
        "--no-summary",
        action="store_true",
        dest="no_summary",
        help="Omit the entry count summary at the end",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log skipped and unreadable entries to stderr",
    )
    return parser


def _translate_recursion_to_max_depth(recursive: str | None) -> int | None:
    """Translate ``-r`` semantics to scanner depth.

    Without ``-r`` only the root's children are listed. A bare ``-r``
    removes the limit, and ``-r N`` descends N levels below the root's
    children.

    Args:
        recursive: Raw CLI value of ``-r/--recursive``.

    Returns:
        int | None: Deepest record depth, or ``None`` for unlimited.

    Raises:
        ConfigError: If the depth is not a non-negative integer.
    """
    if recursive is None:
        return 1
    if recursive == _UNLIMITED:
        return None
    try:
        depth = parse_depth(recursive)
    except ConfigError as exc:
        # ``fss -r DIR`` hands DIR to -r as its depth
        if Path(recursive).is_dir():
            raise ConfigError(
                f"{exc} To scan '{recursive}' without a depth limit, "
                f"place it before the flag: fss {recursive} -r"
            ) from exc
        raise
    return depth + 1


def _build_config(args: argparse.Namespace) -> ScanConfig:
    """Build the scan configuration from parsed arguments.

    Args:
        args: Parsed CLI namespace.

    Returns:
        ScanConfig: Validated configuration.

    Raises:
        ConfigError: On malformed depth or several search modes.
    """
    max_depth = _translate_recursion_to_max_depth(args.recursive)
    searching = any(
        pattern is not None
        for pattern in (args.search, args.search_noext, args.contains)
    )
    return build_config(
        Path(args.path).resolve(),
        search=args.search,
        search_noext=args.search_noext,
        contains=args.contains,
        max_depth=max_depth,
        show_files=args.show_files,
        show_symlinks=args.show_symlinks,
        show_special=args.show_special,
        dir_sizes=args.dir_sizes,
        show_permissions=args.show_permissions,
        show_mtime=args.show_mtime,
        absolute=args.absolute,
        show_errors=args.show_errors,
        gitignore=args.gitignore,
        # Aggregate rows only make sense beside an indented tree
        hidden_summaries=not (args.absolute or args.csv_mode or searching),
    )


def _render(args: argparse.Namespace, stats: ScanStats) -> Iterator[str]:
    """Run the scan/format pipeline, yielding output lines as they are ready.

    Args:
        args: Parsed CLI namespace.
        stats: Accumulator filled while the walk is consumed.

    Yields:
        str: Output lines (the CSV document is yielded whole).

    Raises:
        FssError: On invalid configuration or an inaccessible root.
    """
    config = _build_config(args)
    records = walk(config, stats)

    if args.csv_mode:
        from fsscan.formatter.csv_ import CsvOptions, format_csv

        yield format_csv(records, CsvOptions(show_errors=config.show_errors))
        return

    yield from format_listing(records, ListingOptions.from_config(config))

    if not args.no_summary:
        yield ""
        yield format_summary(
            stats,
            config.root,
            recursive=config.recursive,
            search=config.matcher is not None,
        )


def run_fss(argv: list[str] | None = None) -> str:
    """Run fss with provided CLI args and return formatted output.

    This function is side-effect free and is the primary test target
    for CLI behavior.

    Args:
        argv: Command-line argument list without program name.

    Returns:
        str: Final rendered output.

    Raises:
        FssError: On any user-facing validation or I/O error.
    """
    args = build_parser().parse_args(argv)
    return "\n".join(_render(args, ScanStats()))


def main(argv: list[str] | None = None) -> None:
    """Run the CLI entry point.

    Lines are written to stdout as entries are discovered. Exits with
    code 1 on user-facing errors.
    """
    parser = build_parser()
    args = parser.parse_args(argv)  # single parse

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="fss: %(name)s: %(message)s", stream=sys.stderr
        )

    stats = ScanStats()
    try:
        for line in _render(args, stats):
            sys.stdout.write(line + "\n")
    except FssError as exc:
        sys.stdout.flush()
        sys.stderr.write(f"fss: {exc}\n")
        sys.exit(1)

    if args.show_errors:
        for error in stats.unattached:
            sys.stderr.write(f"fss: {error.describe()}\n")
