"""Entry classification: what a filesystem path is, with and without following symlinks."""

from __future__ import annotations

import enum
import logging
import os
import stat

from pydantic import BaseModel, model_validator

logger = logging.getLogger(__name__)


class EntryKind(str, enum.Enum):
    """Closed set of entry kinds.

    ``INVALID`` covers paths that cannot be stat'ed (dangling symlink,
    permission error, entry removed mid-walk).  ``UNSUPPORTED`` covers
    recognised but unhashable nodes such as sockets and FIFOs.
    """

    DIRECTORY = "directory"
    REGULAR = "regular file"
    DEVICE = "device"
    SYMLINK = "symlink"
    UNSUPPORTED = "unsupported file"
    INVALID = "invalid file"

    @property
    def hashable(self) -> bool:
        return self in (EntryKind.REGULAR, EntryKind.DEVICE)


def kind_from_mode(mode: int) -> EntryKind:
    """Map an ``st_mode`` value to an :class:`EntryKind`."""
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    if stat.S_ISREG(mode):
        return EntryKind.REGULAR
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISBLK(mode) or stat.S_ISCHR(mode):
        return EntryKind.DEVICE
    return EntryKind.UNSUPPORTED


def raw_kind(path: str | os.PathLike[str]) -> EntryKind:
    """Classify *path* without following a terminal symlink."""
    try:
        st = os.lstat(path)
    except OSError:
        logger.debug("lstat failed for %s", path, exc_info=True)
        return EntryKind.INVALID
    return kind_from_mode(st.st_mode)


def resolved_kind(path: str | os.PathLike[str]) -> EntryKind:
    """Classify *path* following symlinks; a dangling link is ``INVALID``."""
    try:
        st = os.stat(path)
    except OSError:
        logger.debug("stat failed for %s", path, exc_info=True)
        return EntryKind.INVALID
    return kind_from_mode(st.st_mode)


class ResolvedEntry(BaseModel):
    """One walked entry after symlink policy has been applied.

    ``link_path`` is set only when the entry was reached through a symlink
    and always names the link itself, never its target.  ``kind`` is
    ``SYMLINK`` only for a link reported as itself (not followed).
    """

    raw_path: str
    resolved_path: str
    link_path: str | None = None
    kind: EntryKind

    @model_validator(mode="after")
    def check_symlink_resolution(self) -> ResolvedEntry:
        if self.kind is EntryKind.SYMLINK:
            if self.link_path is not None or self.resolved_path != self.raw_path:
                raise ValueError(
                    f"{self.raw_path}: a resolved entry cannot still be a symlink"
                )
        if self.link_path is not None and self.link_path != self.raw_path:
            raise ValueError(f"{self.raw_path}: link_path must name the link itself")
        return self
