"""Human-readable statistics lines printed after a walk."""

from __future__ import annotations

from treedigest.fs.kinds import EntryKind
from treedigest.fs.paths import relative_display
from treedigest.walk.stats import HASHED_KINDS, StatCollector, StatEntry

_INDENT = " "


def format_count(n: int, noun: str) -> str:
    """Return ``"<n> <noun>"`` with a naive English plural."""
    if not noun:
        return "???"
    s = f"{n} {noun}"
    if n > 1:
        if noun == EntryKind.DIRECTORY.value:
            s = s[:-1] + "ies"
        else:
            s += "s"
    return s


def render_listing(
    entries: list[StatEntry],
    noun: str,
    prefix: str,
    absolute: bool = False,
) -> list[str]:
    """Header line plus one line per skipped entry; empty if no entries."""
    if not entries:
        return []
    lines = [format_count(len(entries), noun)]
    for e in entries:
        shown = relative_display(e.path, prefix, absolute)
        if e.raw_kind is EntryKind.SYMLINK and e.resolved_kind is not None:
            lines.append(f"{shown} ({e.raw_kind.value} -> {e.resolved_kind.value})")
        else:
            lines.append(f"{shown} ({e.raw_kind.value})")
    return lines


def render_summary(stats: StatCollector, prefix: str, absolute: bool = False) -> list[str]:
    """Verbose count and byte breakdown followed by the ignored listing."""
    lines = [format_count(stats.num_total, "file")]
    for kind in HASHED_KINDS:
        n = stats.count(kind)
        if n > 0:
            lines.append(_INDENT + format_count(n, kind.value))

    lines.append(format_count(stats.written_total, "byte"))
    for kind in HASHED_KINDS:
        b = stats.bytes_for(kind)
        if b > 0:
            lines.append(_INDENT + format_count(b, f"{kind.value} byte"))

    lines.extend(render_listing(stats.ignored, "ignored file", prefix, absolute))
    return lines
