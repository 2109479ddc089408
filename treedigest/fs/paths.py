"""Path resolution: absolute paths, symlink targets, input prefix and display form."""

from __future__ import annotations

import logging
import os
import posixpath
import stat

from treedigest.errors import AccessError, InvalidInputError, InvalidPathError
from treedigest.fs.kinds import EntryKind, raw_kind

logger = logging.getLogger(__name__)

SEPARATOR = "/"


def to_absolute(path: str | os.PathLike[str]) -> str:
    """Return *path* as a lexically cleaned absolute path.

    Relative paths are joined to the current working directory; ``.``,
    ``..`` and duplicate separators are removed.  Symlinks are not
    resolved and the path need not exist.
    """
    try:
        p = os.fspath(path)
    except TypeError as exc:
        raise InvalidPathError(f"Not a path: {path!r}") from exc
    if isinstance(p, bytes):
        try:
            p = os.fsdecode(p)
        except UnicodeDecodeError as exc:
            raise InvalidPathError(f"Cannot decode path {p!r}") from exc
    if not p or "\x00" in p:
        raise InvalidPathError(f"Invalid path {p!r}")

    if not posixpath.isabs(p):
        try:
            cwd = os.getcwd()
        except OSError as exc:
            raise AccessError(".", exc.strerror or str(exc)) from exc
        p = posixpath.join(cwd, p)
    p = posixpath.normpath(p)
    # POSIX keeps a leading "//"; collapse it like any other duplicate
    if p.startswith("//"):
        p = SEPARATOR + p.lstrip(SEPARATOR)
    return p


def basename(path: str) -> str:
    """Final component of a cleaned absolute path (empty for ``/``)."""
    return posixpath.basename(to_absolute(path))


def dirname(path: str) -> str:
    """Parent directory of a cleaned absolute path.

    Raises :class:`InvalidInputError` for ``/``, which has no parent.
    """
    p = to_absolute(path)
    if p == SEPARATOR:
        raise InvalidInputError("The root directory has no parent")
    return posixpath.dirname(p)


def resolve_symlink_target(path: str) -> str | None:
    """Fully resolve *path* to its canonical, symlink-free absolute form.

    Returns None when *path* is itself a broken (or looping) symlink.  Any
    other failure is raised as :class:`AccessError`.
    """
    try:
        return os.path.realpath(path, strict=True)
    except OSError as exc:
        try:
            st = os.lstat(path)
        except OSError as lexc:
            raise AccessError(path, lexc.strerror or str(lexc)) from lexc
        if stat.S_ISLNK(st.st_mode):
            logger.debug("Broken symlink %s: %s", path, exc)
            return None
        raise AccessError(path, exc.strerror or str(exc)) from exc


def input_prefix(root: str) -> str:
    """Return the directory against which paths under *root* are reported.

    A directory is its own prefix; a regular file, device or symlink
    reports relative to its parent.
    """
    p = to_absolute(root)
    kind = raw_kind(p)
    if kind is EntryKind.DIRECTORY:
        return p
    if kind in (EntryKind.REGULAR, EntryKind.DEVICE, EntryKind.SYMLINK):
        return dirname(p)
    if kind is EntryKind.INVALID:
        try:
            os.lstat(p)
        except OSError as exc:
            raise AccessError(p, exc.strerror or str(exc)) from exc
    raise InvalidInputError(f"{p}: unusable input ({kind.value})")


def _trim_prefix(path: str, prefix: str) -> str:
    head = prefix + SEPARATOR
    if path.startswith(head):
        return path[len(head):]
    return path


def relative_display(path: str, prefix: str, absolute_mode: bool = False) -> str:
    """Printable form of *path* relative to the input *prefix*.

    Outside absolute mode the result never starts with a separator, with
    one exception: a path outside the prefix (a symlink target elsewhere)
    is returned unchanged, as an absolute path.
    """
    if absolute_mode:
        return path
    if path == prefix:
        return "."
    if prefix == SEPARATOR:
        return path[1:] if path.startswith(SEPARATOR) else path
    return _trim_prefix(path, prefix)


def relative_identity(path: str, prefix: str) -> str:
    """Prefix-relative path string used as a directory's identity bytes.

    Unlike :func:`relative_display` this never depends on absolute mode,
    so the directory digest does not change when the tree is relocated.
    """
    if prefix == SEPARATOR:
        return path[1:] if path.startswith(SEPARATOR) else path
    return _trim_prefix(path, prefix)
