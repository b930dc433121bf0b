"""Entry descriptors and kind classification."""

from __future__ import annotations

import stat
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path


class EntryKind(Enum):
    """Display category of a filesystem entry."""

    DIRECTORY = "dir"
    REGULAR_FILE = "file"
    SYMLINK = "symlink"
    SPECIAL = "special"


class SpecialType(Enum):
    """Sub-type of a special entry, with its display label as value."""

    SOCKET = "SOCKET"
    BLOCK_DEVICE = "BLOCK DEVICE"
    CHAR_DEVICE = "CHAR DEVICE"
    FIFO = "FIFO PIPE"
    OTHER = "SPECIAL"


@dataclass(frozen=True, slots=True)
class EntryDescriptor:
    """Raw metadata facts about one filesystem node.

    Attributes:
        name: Basename of the entry.
        path: Absolute path of the entry.
        mode: Raw ``st_mode`` as returned by ``lstat``.
        size: Apparent size in bytes.
        mtime: Last modification time (seconds since the epoch).
        is_symlink: Whether the entry itself is a symbolic link.
        link_target: Fully resolved link target, ``None`` when unresolvable
            or when the entry is not a symlink.
        link_error: Reason the link target could not be resolved.
        target_is_dir: Whether the resolved link target is a directory.
    """

    name: str
    path: Path
    mode: int
    size: int = 0
    mtime: float = 0.0
    is_symlink: bool = False
    link_target: Path | None = None
    link_error: str | None = None
    target_is_dir: bool = False

    @property
    def permissions(self) -> str:
        """Owner/group/other permission triplets, e.g. ``rwxr-x---``."""
        return stat.filemode(self.mode)[1:]

    @property
    def modified(self) -> datetime:
        """Local modification time."""
        return datetime.fromtimestamp(self.mtime)


def classify(descriptor: EntryDescriptor) -> EntryKind:
    """Map a descriptor to its display kind.

    Symlink-ness wins over everything else: a link to a directory is
    reported as a symlink and never resolved to its target's kind.

    Args:
        descriptor: Entry metadata.

    Returns:
        EntryKind: The entry's kind.
    """
    if descriptor.is_symlink or stat.S_ISLNK(descriptor.mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(descriptor.mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(descriptor.mode):
        return EntryKind.REGULAR_FILE
    return EntryKind.SPECIAL


def special_type(descriptor: EntryDescriptor) -> SpecialType:
    """Return the special sub-type of a descriptor."""
    mode = descriptor.mode
    if stat.S_ISSOCK(mode):
        return SpecialType.SOCKET
    if stat.S_ISBLK(mode):
        return SpecialType.BLOCK_DEVICE
    if stat.S_ISCHR(mode):
        return SpecialType.CHAR_DEVICE
    if stat.S_ISFIFO(mode):
        return SpecialType.FIFO
    return SpecialType.OTHER
