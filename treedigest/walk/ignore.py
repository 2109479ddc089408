"""Dot-file and symlink ignore rules."""

from __future__ import annotations

import posixpath

from treedigest.fs.kinds import EntryKind


class IgnorePolicy:
    """Decide whether a walked entry is excluded from hashing.

    Directories are never ignored by the dot rules, so a dot directory's
    contents can be excluded while the tree structure above them stays.

    Parameters
    ----------
    ignore_dot:
        Ignore entries matching either dot rule below.
    ignore_dot_dir:
        Ignore entries whose path contains a ``/.`` segment, unless the
        entry's own basename starts with a dot.
    ignore_dot_file:
        Ignore entries whose basename starts with a dot.
    ignore_symlink:
        Ignore every symlink, before any resolution.
    """

    def __init__(
        self,
        *,
        ignore_dot: bool = False,
        ignore_dot_dir: bool = False,
        ignore_dot_file: bool = False,
        ignore_symlink: bool = False,
    ) -> None:
        self.ignore_dot = ignore_dot
        self.ignore_dot_dir = ignore_dot_dir
        self.ignore_dot_file = ignore_dot_file
        self.ignore_symlink = ignore_symlink

    @classmethod
    def from_options(cls, options) -> IgnorePolicy:
        return cls(
            ignore_dot=options.ignore_dot,
            ignore_dot_dir=options.ignore_dot_dir,
            ignore_dot_file=options.ignore_dot_file,
            ignore_symlink=options.ignore_symlink,
        )

    def should_ignore(self, path: str, kind: EntryKind) -> bool:
        """Apply the dot rules to an absolute *path* of raw *kind*."""
        if kind is EntryKind.DIRECTORY:
            return False

        base_dot = posixpath.basename(path).startswith(".")
        dot_segment = "/." in path

        # XXX own-basename exemption applies to ignore_dot_dir only, not ignore_dot
        if self.ignore_dot_dir and not base_dot and dot_segment:
            return True
        if self.ignore_dot_file and base_dot:
            return True
        return self.ignore_dot and (base_dot or dot_segment)

    def should_ignore_symlink(self, kind: EntryKind) -> bool:
        return self.ignore_symlink and kind is EntryKind.SYMLINK
