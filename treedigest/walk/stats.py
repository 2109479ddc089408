"""StatCollector — per-kind counts, byte totals and skipped-entry lists."""

from __future__ import annotations

from pydantic import BaseModel

from treedigest.fs.kinds import EntryKind

# Kinds that contribute digests, in reporting order
HASHED_KINDS = (
    EntryKind.DIRECTORY,
    EntryKind.REGULAR,
    EntryKind.DEVICE,
    EntryKind.SYMLINK,
)


class StatEntry(BaseModel):
    """A skipped entry and how it was classified."""

    path: str
    raw_kind: EntryKind
    resolved_kind: EntryKind | None = None


class StatCollector:
    """Statistics for one walk; feeds reporting only, never the digest."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.hashed: dict[EntryKind, list[str]] = {k: [] for k in HASHED_KINDS}
        self.written: dict[EntryKind, int] = {k: 0 for k in HASHED_KINDS}
        self.unsupported: list[StatEntry] = []
        self.invalid: list[StatEntry] = []
        self.ignored: list[StatEntry] = []

    # -- Recording ------------------------------------------------------------

    def record_hashed(self, kind: EntryKind, path: str, written: int) -> None:
        if kind not in self.hashed:
            raise ValueError(f"{path}: {kind.value} is not a hashed kind")
        self.hashed[kind].append(path)
        self.written[kind] += written

    def record_unsupported(
        self, path: str, raw: EntryKind, resolved: EntryKind | None = None,
    ) -> None:
        self.unsupported.append(StatEntry(path=path, raw_kind=raw, resolved_kind=resolved))

    def record_invalid(
        self, path: str, raw: EntryKind, resolved: EntryKind | None = None,
    ) -> None:
        self.invalid.append(StatEntry(path=path, raw_kind=raw, resolved_kind=resolved))

    def record_ignored(
        self, path: str, raw: EntryKind, resolved: EntryKind | None = None,
    ) -> None:
        self.ignored.append(StatEntry(path=path, raw_kind=raw, resolved_kind=resolved))

    # -- Queries --------------------------------------------------------------

    def count(self, kind: EntryKind) -> int:
        return len(self.hashed.get(kind, ()))

    def bytes_for(self, kind: EntryKind) -> int:
        return self.written.get(kind, 0)

    @property
    def num_total(self) -> int:
        return sum(len(v) for v in self.hashed.values())

    @property
    def written_total(self) -> int:
        return sum(self.written.values())
