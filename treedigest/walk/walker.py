"""TreeWalker — enumerate a tree, classify each entry and hash it.

Each accepted entry is either printed as a ``"<hex>  <path>"`` line or, in
squash mode, folded into a :class:`~treedigest.squash.SquashStrategy` whose
buffer is hashed once more with the selected algorithm after the walk.
"""

from __future__ import annotations

import logging
import os
import posixpath
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

from treedigest.errors import AccessError, SymlinkChainError
from treedigest.fs.kinds import EntryKind, ResolvedEntry, raw_kind, resolved_kind
from treedigest.fs.paths import (
    input_prefix,
    relative_display,
    relative_identity,
    resolve_symlink_target,
    to_absolute,
)
from treedigest.hashing.hasher import DigestResult, Hasher
from treedigest.squash.base import SquashStrategy
from treedigest.squash.registry import new_squash
from treedigest.walk.ignore import IgnorePolicy
from treedigest.walk.options import WalkOptions
from treedigest.walk.report import format_count, render_listing, render_summary
from treedigest.walk.stats import StatCollector

logger = logging.getLogger(__name__)


def _list_dir(dirpath: str) -> list[tuple[str, bool]]:
    """Children of *dirpath* as ``(path, is_real_directory)`` pairs."""
    children: list[tuple[str, bool]] = []
    try:
        with os.scandir(dirpath) as it:
            for entry in it:
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                except OSError:
                    is_dir = False
                children.append((entry.path, is_dir))
    except OSError as exc:
        raise AccessError(dirpath, exc.strerror or str(exc)) from exc
    return children


def iter_tree(root: str, follow_root: bool = False) -> Iterator[str]:
    """Yield *root* and everything below it, depth-first pre-order.

    Children come in ``os.scandir`` order, which is filesystem dependent.
    Symlinked directories below the root are yielded but never descended
    into.  With *follow_root*, a root that is a symlink to a directory is
    descended, and its children are reported under the link path.
    """
    yield root
    kind = raw_kind(root)
    if kind is EntryKind.SYMLINK and follow_root:
        kind = resolved_kind(root)
    if kind is not EntryKind.DIRECTORY:
        return

    stack = [iter(_list_dir(root))]
    while stack:
        child = next(stack[-1], None)
        if child is None:
            stack.pop()
            continue
        path, is_dir = child
        yield path
        if is_dir:
            stack.append(iter(_list_dir(path)))


class WalkResult(BaseModel):
    """Outcome of one root walk."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    root: str
    prefix: str
    stats: StatCollector
    squash_digest: str | None = None
    squash_bytes: int = 0


@dataclass
class _WalkContext:
    """State owned by a single walk, threaded through every handler."""

    root: str
    prefix: str
    squash: SquashStrategy
    stats: StatCollector = field(default_factory=StatCollector)


class TreeWalker:
    """Walk filesystem trees and emit digest lines.

    Parameters
    ----------
    options:
        Resolved walk options; defaults to sha256 per-entry output.
    emit:
        Called with each output line (digests and statistics).
    """

    def __init__(
        self,
        options: WalkOptions | None = None,
        emit: Callable[[str], None] = print,
    ) -> None:
        self.options = options or WalkOptions()
        self.emit = emit
        self._ignore = IgnorePolicy.from_options(self.options)

    # -- Public API -----------------------------------------------------------

    def walk(self, root: str | os.PathLike[str]) -> WalkResult:
        """Walk one root and emit its output.

        Raises a :class:`~treedigest.errors.TreeDigestError` on any fatal
        condition; nothing further is emitted for this root after that.
        """
        opts = self.options
        root_path = to_absolute(root)
        prefix = input_prefix(root_path)
        ctx = _WalkContext(
            root=root_path,
            prefix=prefix,
            squash=new_squash(opts.squash_version),
        )
        logger.debug("Walking %s (prefix %s)", root_path, prefix)

        follow_root = opts.follow_symlink and not opts.ignore_symlink
        paths: Iterator[str] | list[str] = iter_tree(root_path, follow_root)
        if opts.sort:
            paths = sorted(paths)
        for path in paths:
            self._visit(path, ctx)

        if opts.verbose:
            self._emit_lines(render_summary(ctx.stats, prefix, opts.abs))
        self._emit_lines(
            render_listing(ctx.stats.unsupported, EntryKind.UNSUPPORTED.value, prefix, opts.abs)
        )
        self._emit_lines(
            render_listing(ctx.stats.invalid, EntryKind.INVALID.value, prefix, opts.abs)
        )

        result = WalkResult(root=root_path, prefix=prefix, stats=ctx.stats)
        if opts.squash:
            buf = ctx.squash.finalize()
            result.squash_bytes = len(buf)
            result.squash_digest = self._emit_squash(buf, ctx)
        return result

    # -- Classification -------------------------------------------------------

    def _visit(self, path: str, ctx: _WalkContext) -> None:
        opts = self.options
        kind = raw_kind(path)

        if self._ignore.should_ignore(path, kind):
            ctx.stats.record_ignored(path, kind, self._link_kind(path, kind))
            return

        if kind is not EntryKind.SYMLINK:
            self._dispatch(ResolvedEntry(raw_path=path, resolved_path=path, kind=kind), ctx)
            return

        if self._ignore.should_ignore_symlink(kind):
            ctx.stats.record_ignored(path, kind, resolved_kind(path))
            return

        if not opts.follow_symlink:
            self._hash_symlink(path, ctx)
            return

        target = resolve_symlink_target(path)
        if target is None:
            self._record_invalid(path, EntryKind.SYMLINK, EntryKind.INVALID, ctx)
            return
        if raw_kind(target) is EntryKind.SYMLINK:
            raise SymlinkChainError(f"{path}: resolved to {target}, still a symlink")

        entry = ResolvedEntry(
            raw_path=path,
            resolved_path=target,
            link_path=path,
            kind=resolved_kind(target),
        )
        self._dispatch(entry, ctx)

    @staticmethod
    def _link_kind(path: str, kind: EntryKind) -> EntryKind | None:
        return resolved_kind(path) if kind is EntryKind.SYMLINK else None

    def _dispatch(self, entry: ResolvedEntry, ctx: _WalkContext) -> None:
        kind = entry.kind
        if kind is EntryKind.DIRECTORY:
            self._hash_directory(entry, ctx)
        elif kind in (EntryKind.REGULAR, EntryKind.DEVICE):
            self._hash_file(entry, ctx)
        elif kind is EntryKind.UNSUPPORTED:
            self._trace(entry.resolved_path, kind)
            raw = EntryKind.SYMLINK if entry.link_path else kind
            ctx.stats.record_unsupported(entry.raw_path, raw, kind if entry.link_path else None)
        elif kind is EntryKind.INVALID:
            raw = EntryKind.SYMLINK if entry.link_path else kind
            self._record_invalid(entry.raw_path, raw, kind if entry.link_path else None, ctx)
        else:
            raise SymlinkChainError(f"{entry.raw_path}: unexpected {kind.value} after resolution")

    # -- Handlers -------------------------------------------------------------

    def _hash_directory(self, entry: ResolvedEntry, ctx: _WalkContext) -> None:
        path = entry.resolved_path
        # The input prefix itself contributes nothing
        if path == ctx.prefix:
            return
        if not self.options.squash:
            return

        self._trace(path, EntryKind.DIRECTORY)
        result = Hasher.hash_string(relative_identity(path, ctx.prefix), self.options.algorithm)
        ctx.stats.record_hashed(EntryKind.DIRECTORY, path, result.written)
        ctx.squash.absorb(self._blob(self._label(entry, ctx), result))

    def _hash_file(self, entry: ResolvedEntry, ctx: _WalkContext) -> None:
        path = entry.resolved_path
        self._trace(path, entry.kind)
        result = Hasher.hash_file(path, self.options.algorithm)
        ctx.stats.record_hashed(entry.kind, path, result.written)
        self._accept(self._label(entry, ctx), result, ctx)

    def _hash_symlink(self, path: str, ctx: _WalkContext) -> None:
        """Hash an unfollowed symlink by its basename, not its target."""
        self._trace(path, EntryKind.SYMLINK)
        result = Hasher.hash_string(posixpath.basename(path), self.options.algorithm)
        ctx.stats.record_hashed(EntryKind.SYMLINK, path, result.written)
        self._accept(relative_display(path, ctx.prefix, self.options.abs), result, ctx)

    def _record_invalid(
        self,
        path: str,
        raw: EntryKind,
        resolved: EntryKind | None,
        ctx: _WalkContext,
    ) -> None:
        self._trace(path, EntryKind.INVALID)
        ctx.stats.record_invalid(path, raw, resolved)

    # -- Output ---------------------------------------------------------------

    def _accept(self, label: str, result: DigestResult, ctx: _WalkContext) -> None:
        """Print or squash a hashed entry that passes verification."""
        hex_digest = result.hex
        if not self.options.matches_verify(hex_digest):
            return
        if self.options.squash:
            ctx.squash.absorb(self._blob(label, result))
        else:
            self.emit(self._format_line(label, hex_digest))

    def _emit_squash(self, buf: bytes, ctx: _WalkContext) -> str:
        opts = self.options
        if opts.verbose:
            self.emit(format_count(len(buf), "squashed byte"))

        hex_digest = Hasher.hash_bytes(buf, opts.algorithm).hex
        if not opts.matches_verify(hex_digest):
            return hex_digest

        if opts.hash_only:
            self.emit(hex_digest)
            return hex_digest
        shown = relative_display(ctx.root, ctx.prefix, opts.abs)
        if shown == ".":
            self.emit(hex_digest + ctx.squash.tag)
        else:
            self.emit(self._format_line(shown, hex_digest) + ctx.squash.tag)
        return hex_digest

    def _label(self, entry: ResolvedEntry, ctx: _WalkContext) -> str:
        """Display path, as ``"<link> -> <target>"`` for followed symlinks."""
        shown = relative_display(entry.resolved_path, ctx.prefix, self.options.abs)
        if entry.link_path is not None:
            link = relative_display(entry.link_path, ctx.prefix, self.options.abs)
            shown = f"{link} -> {shown}"
        return shown

    def _blob(self, label: str, result: DigestResult) -> bytes:
        if self.options.hash_only:
            return result.digest
        return os.fsencode(label) + result.digest

    def _format_line(self, label: str, hex_digest: str) -> str:
        if self.options.hash_only:
            return hex_digest
        if self.options.swap:
            return f"{label}  {hex_digest}"
        # compatible with sha*sum output
        return f"{hex_digest}  {label}"

    def _emit_lines(self, lines: list[str]) -> None:
        for line in lines:
            self.emit(line)

    def _trace(self, path: str, kind: EntryKind) -> None:
        logger.debug("### %s %s", path, kind.value)


def digest_tree(
    root: str | os.PathLike[str],
    options: WalkOptions | None = None,
    emit: Callable[[str], None] = print,
) -> WalkResult:
    """Convenience wrapper: walk a single *root* with a fresh walker."""
    return TreeWalker(options, emit).walk(root)
