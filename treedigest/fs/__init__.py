"""Filesystem classification and path resolution."""

from treedigest.fs.kinds import (
    EntryKind,
    ResolvedEntry,
    kind_from_mode,
    raw_kind,
    resolved_kind,
)
from treedigest.fs.paths import (
    basename,
    dirname,
    input_prefix,
    relative_display,
    relative_identity,
    resolve_symlink_target,
    to_absolute,
)

__all__ = [
    "EntryKind",
    "ResolvedEntry",
    "basename",
    "dirname",
    "input_prefix",
    "kind_from_mode",
    "raw_kind",
    "relative_display",
    "relative_identity",
    "resolve_symlink_target",
    "resolved_kind",
    "to_absolute",
]
